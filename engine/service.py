"""Request-level facade over the catalog and the comparison engine.

Routes talk to ``ComparisonService`` only; it resolves ids against the
catalog, auto-selects a unit when none is given, and memoizes formatted
comparisons by ``(amount, unit_id)``.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from catalog.loader import Catalog
from catalog.models import BudgetItem, ComparisonUnit, FeaturedComparison, FormattedComparison
from engine.alternatives import Alternatives, generate_alternatives
from engine.calculator import create_formula, format_comparison_result
from engine.selector import find_best_comparison
from engine.wizard import (
    MAX_RESULTS as MAX_WIZARD_RESULTS,
    WizardComparison,
    generate_wizard_comparisons,
)
from utils.cache import TTLCache
from utils.share import encode_comparison

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonOutcome:
    item: BudgetItem
    unit: ComparisonUnit
    result: FormattedComparison
    auto_selected: bool
    share_id: str
    formula: str


@dataclass(frozen=True)
class FeaturedOutcome:
    id: str
    featured: FeaturedComparison
    item: BudgetItem
    unit: ComparisonUnit
    result: FormattedComparison


class ComparisonService:
    """Compare budget items with units using an in-memory catalog.

    Args:
        catalog: Loaded catalog to resolve ids against.
        cache: Optional TTL cache for formatted comparisons. Comparisons are
            pure, so the cache never changes a result.
    """

    def __init__(self, catalog: Catalog, cache: Optional[TTLCache] = None):
        self.catalog = catalog
        self.cache = cache

    def format(self, amount: float, unit: ComparisonUnit) -> FormattedComparison:
        if self.cache is None:
            return format_comparison_result(amount, unit)
        return self.cache.get_or_compute(
            (amount, unit.id), lambda: format_comparison_result(amount, unit)
        )

    def select_unit(self, item: BudgetItem) -> Optional[ComparisonUnit]:
        """Best unit for *item*, favouring its related categories."""
        return find_best_comparison(item.amount, self.catalog.units, item.related_categories)

    def compare(self, budget_id: str, unit_id: Optional[str] = None) -> Optional[ComparisonOutcome]:
        """Compare a budget item against a unit, auto-selecting the unit if needed.

        Returns None when the budget item or the requested unit is unknown,
        or when no unit is available for auto-selection.
        """
        item = self.catalog.get_item(budget_id)
        if item is None:
            return None

        auto_selected = unit_id is None
        if auto_selected:
            unit = self.select_unit(item)
            if unit is None:
                logger.warning("No comparison units available for %s", budget_id)
                return None
        else:
            unit = self.catalog.get_unit(unit_id)
            if unit is None:
                return None

        result = self.format(item.amount, unit)
        return ComparisonOutcome(
            item=item,
            unit=unit,
            result=result,
            auto_selected=auto_selected,
            share_id=encode_comparison(item.id, unit.id),
            formula=create_formula(item.amount, unit, result.count),
        )

    def alternatives(self, budget_id: str, unit_id: str,
                     limit: Optional[int] = None) -> Optional[Alternatives]:
        """Spending and unit alternatives for the pair, or None on unknown ids."""
        item = self.catalog.get_item(budget_id)
        unit = self.catalog.get_unit(unit_id)
        if item is None or unit is None:
            return None
        return generate_alternatives(
            item, unit, self.catalog.budget_items, self.catalog.units, limit
        )

    def featured(self, shuffle: bool = False, limit: Optional[int] = None,
                 rng: Optional[random.Random] = None) -> list[FeaturedOutcome]:
        """Curated comparisons with computed counts, in display order.

        Entries referring to unknown items or units are logged and skipped.
        """
        entries = [f for f in self.catalog.featured if f.is_featured]
        if shuffle:
            (rng or random.Random()).shuffle(entries)
        outcomes = []
        for entry in entries:
            if limit is not None and len(outcomes) >= limit:
                break
            item = self.catalog.get_item(entry.budget_item_id)
            unit = self.catalog.get_unit(entry.unit_id)
            if item is None or unit is None:
                logger.warning(
                    "Skipping featured comparison %s-%s: unknown %s",
                    entry.budget_item_id, entry.unit_id,
                    "budget item" if item is None else "unit",
                )
                continue
            outcomes.append(FeaturedOutcome(
                id=f"{entry.budget_item_id}-{entry.unit_id}",
                featured=entry,
                item=item,
                unit=unit,
                result=self.format(item.amount, unit),
            ))
        return outcomes

    def wizard(self, priorities: Sequence[str], wasteful: Sequence[str],
               top_priority: Optional[str] = None,
               limit: int = MAX_WIZARD_RESULTS) -> list[WizardComparison]:
        """Personalized comparisons for the priorities wizard."""
        return generate_wizard_comparisons(
            self.catalog.budget_items, self.catalog.units,
            priorities, wasteful, top_priority, limit,
        )

    def cache_stats(self) -> Optional[dict[str, int]]:
        return self.cache.stats() if self.cache is not None else None
