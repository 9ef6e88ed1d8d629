"""Alternatives generator for the "try other comparisons" panels.

For a chosen (budget item, unit) pair this proposes:

- other budget items measured in the same unit, ranked by how easy the
  ratio between the two amounts is to say out loud
- other units measured against the same budget item, ranked by impact score

Both lists come back complete; callers slice them for display and keep the
rest for "browse all".
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from catalog.models import BudgetItem, ComparisonUnit
from engine.calculator import format_comparison_result
from engine.selector import rank_units
from utils.formatting import format_decimal

NICE_MULTIPLES = (0.5, 2, 3, 4, 5, 10, 20, 50, 100)


@dataclass(frozen=True)
class SpendingAlternative:
    item: BudgetItem
    count: float
    formatted: str
    ratio: float
    interest: int
    comparison: str


@dataclass(frozen=True)
class UnitAlternative:
    unit: ComparisonUnit
    count: float
    formatted: str
    score: float


@dataclass
class Alternatives:
    spending: list[SpendingAlternative] = field(default_factory=list)
    units: list[UnitAlternative] = field(default_factory=list)


def comparison_interest(ratio: float) -> int:
    """How communicable a ratio between two amounts is (20-100)."""
    if abs(ratio - 1) < 0.01:
        return 100
    for multiple in NICE_MULTIPLES:
        if abs(ratio - multiple) < 0.1:
            return 90
    if 0.1 <= ratio <= 10:
        return 70
    if 10 < ratio <= 100:
        return 50
    return 20


def format_ratio_comparison(ratio: float, item_name: str, other_name: str) -> str:
    """Sentence comparing two amounts, e.g. "NASA is 3.2x less than Defense"."""
    if math.isinf(ratio):
        return f"{item_name} is funded where {other_name} has no funding"
    if abs(ratio - 1) < 0.01:
        return f"{item_name} costs about the same as {other_name}"
    if ratio > 1:
        return f"{item_name} is {format_decimal(ratio)}x more than {other_name}"
    return f"{item_name} is {format_decimal(1 / ratio)}x less than {other_name}"


def _log_distance(ratio: float) -> float:
    return abs(math.log10(ratio)) if ratio > 0 else math.inf


def spending_alternatives(item: BudgetItem, unit: ComparisonUnit,
                          items: Iterable[BudgetItem],
                          limit: Optional[int] = None) -> list[SpendingAlternative]:
    """Other budget items expressed in *unit*, most interesting first.

    Excludes *item* itself and zero-amount items. Sorted by interest, then by
    closeness in order of magnitude, then by id. Against an unfunded *item*
    every ratio is infinite, so the others are listed largest count first.
    """
    unfunded = item.amount <= 0
    result = []
    for other in items:
        if other.id == item.id or other.amount <= 0:
            continue
        ratio = math.inf if unfunded else other.amount / item.amount
        comparison = format_comparison_result(other.amount, unit)
        result.append(SpendingAlternative(
            item=other,
            count=comparison.count,
            formatted=comparison.display_string,
            ratio=ratio,
            interest=comparison_interest(ratio),
            comparison=format_ratio_comparison(ratio, other.name, item.name),
        ))
    if unfunded:
        result.sort(key=lambda a: (-a.count, a.item.id))
    else:
        result.sort(key=lambda a: (-a.interest, _log_distance(a.ratio), a.item.id))
    return result if limit is None else result[:max(limit, 0)]


def unit_alternatives(item: BudgetItem, unit: ComparisonUnit,
                      units: Iterable[ComparisonUnit],
                      limit: Optional[int] = None) -> list[UnitAlternative]:
    """Other units measured against *item*, ranked by impact score."""
    ranked = rank_units(item.amount, units,
                        category_hint=item.related_categories,
                        exclude_ids=unit.id)
    result = []
    for scored in ranked:
        comparison = format_comparison_result(item.amount, scored.unit, scored.count)
        result.append(UnitAlternative(
            unit=scored.unit,
            count=scored.count,
            formatted=comparison.display_string,
            score=scored.score,
        ))
    return result if limit is None else result[:max(limit, 0)]


def generate_alternatives(item: BudgetItem, unit: ComparisonUnit,
                          items: Iterable[BudgetItem],
                          units: Iterable[ComparisonUnit],
                          limit: Optional[int] = None) -> Alternatives:
    """Both alternative lists for the (item, unit) pair."""
    return Alternatives(
        spending=spending_alternatives(item, unit, items, limit),
        units=unit_alternatives(item, unit, units, limit),
    )
