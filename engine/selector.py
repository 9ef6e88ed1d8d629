"""Best-match selector: rank the unit catalog for a dollar amount."""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from catalog.models import ComparisonUnit
from engine.scoring import CategoryHint, impact_score, normalize_hint

DEFAULT_ALTERNATIVES = 3

ExcludeIds = Optional[Union[str, Iterable[str]]]


@dataclass(frozen=True)
class ScoredUnit:
    unit: ComparisonUnit
    score: float
    count: float


def _exclusions(exclude_ids: ExcludeIds) -> frozenset[str]:
    if not exclude_ids:
        return frozenset()
    if isinstance(exclude_ids, str):
        return frozenset({exclude_ids})
    return frozenset(exclude_ids)


def rank_units(amount: float, units: Iterable[ComparisonUnit],
               category_hint: CategoryHint = None,
               exclude_ids: ExcludeIds = ()) -> list[ScoredUnit]:
    """Score every candidate unit and sort best first.

    Ordering is by descending score, ties broken by ascending unit id, so the
    result is identical for identical inputs. Units with an unusable cost are
    skipped.
    """
    excluded = _exclusions(exclude_ids)
    hint = normalize_hint(category_hint)
    scored = []
    for unit in units:
        if unit.id in excluded:
            continue
        cost = unit.cost_per_unit
        if not math.isfinite(cost) or cost <= 0:
            continue
        scored.append(ScoredUnit(
            unit=unit,
            score=impact_score(amount, unit, hint),
            count=amount / cost,
        ))
    scored.sort(key=lambda s: (-s.score, s.unit.id))
    return scored


def find_best_comparison(amount: float, units: Iterable[ComparisonUnit],
                         category_hint: CategoryHint = None) -> Optional[ComparisonUnit]:
    """Highest-scoring unit for *amount*, or None when there are no candidates."""
    ranked = rank_units(amount, units, category_hint)
    return ranked[0].unit if ranked else None


def get_alternatives(amount: float, units: Iterable[ComparisonUnit],
                     exclude_ids: ExcludeIds = None,
                     n: int = DEFAULT_ALTERNATIVES,
                     category_hint: CategoryHint = None,
                     diverse: bool = False) -> list[ComparisonUnit]:
    """Next best units after removing *exclude_ids*.

    With ``diverse=True`` the best unit of each distinct category is taken
    first (in score order) and remaining slots are filled by score.
    """
    if n <= 0:
        return []
    ranked = rank_units(amount, units, category_hint, exclude_ids)
    if not diverse:
        return [s.unit for s in ranked[:n]]

    picked: list[ComparisonUnit] = []
    used_categories: set[str] = set()
    for scored in ranked:
        if len(picked) >= n:
            break
        if scored.unit.category not in used_categories:
            picked.append(scored.unit)
            used_categories.add(scored.unit.category)
    for scored in ranked:
        if len(picked) >= n:
            break
        if scored.unit not in picked:
            picked.append(scored.unit)
    return picked
