"""Personalized comparisons from the priorities wizard.

A visitor picks the spending areas they care about ("priorities") and the
ones they consider wasteful. Every budget item in a wasteful area is priced
in every unit of every priority area, e.g. "Department of Defense could fund
12,953,846 Teacher Salaries (annual)".

Ordering:

1. comparisons for the visitor's top priority first
2. then by unit count, but only when two counts differ by more than 100
3. then by budget amount, largest first

Only the first few survive; counts below one unit are dropped.
"""

import math
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, Mapping, Optional, Sequence

from catalog.models import BudgetItem, ComparisonUnit

MAX_RESULTS = 5
COUNT_GAP = 100

PRIORITY_CATEGORIES = {
    "education": "Education",
    "healthcare": "Healthcare",
    "veterans": "Veterans",
    "infrastructure": "Infrastructure",
    "environment": "Environment",
    "housing": "Housing",
    "science": "Science & Research",
    "social-security": "Social Security",
}

WASTEFUL_CATEGORIES = {
    "defense": "Defense/Military",
    "foreign-aid": "Foreign Aid",
    "admin": "Government Admin",
    "farm-subsidies": "Farm Subsidies",
    "interest": "Interest on Debt",
    "other": "Other",
}

# Priority area -> unit category it is priced in.
PRIORITY_UNIT_CATEGORIES = {
    "education": "education",
    "healthcare": "healthcare",
    "veterans": "veterans",
    "infrastructure": "transportation",
    "environment": "environment",
    "housing": "housing",
    "science": "education",
    "social-security": "income",
}

# Wasteful area -> budget item ids that represent it.
WASTEFUL_BUDGET_ITEMS = {
    "defense": ("defense", "f35-procurement", "shipbuilding", "missile-defense"),
    "foreign-aid": ("state",),
    "admin": ("justice",),
    "farm-subsidies": ("usda",),
    "interest": ("treasury-interest",),
    "other": (),
}


@dataclass(frozen=True)
class WizardComparison:
    item: BudgetItem
    unit: ComparisonUnit
    count: float
    is_top_priority: bool
    priority_category: str
    wasteful_category: str

    @property
    def headline(self) -> str:
        return format_comparison_headline(self)


def format_comparison_headline(comparison: WizardComparison) -> str:
    """e.g. ``"F-35 Procurement could fund 184,615 Teacher Salaries (annual)"``."""
    whole = math.floor(comparison.count)
    return (f"{comparison.item.name} could fund {whole:,} "
            f"{comparison.unit.display_name(whole)}")


def _compare(a: WizardComparison, b: WizardComparison) -> int:
    if a.is_top_priority != b.is_top_priority:
        return -1 if a.is_top_priority else 1
    if abs(b.count - a.count) > COUNT_GAP:
        return 1 if b.count > a.count else -1
    return (b.item.amount > a.item.amount) - (b.item.amount < a.item.amount)


def generate_wizard_comparisons(
    items: Iterable[BudgetItem],
    units: Iterable[ComparisonUnit],
    priorities: Sequence[str],
    wasteful: Sequence[str],
    top_priority: Optional[str] = None,
    limit: int = MAX_RESULTS,
    item_map: Mapping[str, Sequence[str]] = WASTEFUL_BUDGET_ITEMS,
    unit_map: Mapping[str, str] = PRIORITY_UNIT_CATEGORIES,
) -> list[WizardComparison]:
    """Cross wasteful-area budget items with priority-area units.

    Unknown category names contribute nothing. Ties that survive every
    ordering rule keep generation order (wasteful area, priority area,
    mapped item order, catalog unit order).
    """
    items_by_id = {item.id: item for item in items}
    units = list(units)

    comparisons = []
    for waste in wasteful:
        waste_items = [items_by_id[i] for i in item_map.get(waste, ()) if i in items_by_id]
        for priority in priorities:
            unit_category = unit_map.get(priority)
            priority_units = [u for u in units if u.category == unit_category]
            for item in waste_items:
                for unit in priority_units:
                    if unit.cost_per_unit <= 0:
                        continue
                    count = item.amount / unit.cost_per_unit
                    if count < 1:
                        continue
                    comparisons.append(WizardComparison(
                        item=item,
                        unit=unit,
                        count=count,
                        is_top_priority=priority == top_priority,
                        priority_category=priority,
                        wasteful_category=waste,
                    ))

    comparisons.sort(key=cmp_to_key(_compare))
    return comparisons[:max(limit, 0)]
