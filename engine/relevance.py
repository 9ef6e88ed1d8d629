"""Search relevance ranking for budget items and comparison units.

Relevance ladder (first match wins, case-insensitive)::

    100  id equals query
     90  name equals query
     70  name starts with query
     60  id starts with query
     50  query starts a word in name ("defense" in "Department of Defense")
     30  name contains query
     20  id contains query
      0  no match

Empty or whitespace-only queries match nothing; they are not an error.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from catalog.models import BudgetItem, ComparisonUnit
from utils.config import MAX_SEARCH_RESULTS
from utils.strings import normalize_query, word_boundary_pattern

DESCRIPTION_MATCH_SCORE = 10


@dataclass(frozen=True)
class SearchHit:
    record: Any
    score: int


def calculate_relevance_score(item_id: str, name: str, query: str) -> int:
    """Score one record against *query* using the relevance ladder."""
    q = normalize_query(query)
    if not q:
        return 0
    lower_id = item_id.lower()
    lower_name = name.lower()

    if lower_id == q:
        return 100
    if lower_name == q:
        return 90
    if lower_name.startswith(q):
        return 70
    if lower_id.startswith(q):
        return 60
    if word_boundary_pattern(q).search(lower_name):
        return 50
    if q in lower_name:
        return 30
    if q in lower_id:
        return 20
    return 0


def _rank(hits: list[SearchHit]) -> list[SearchHit]:
    # list.sort is stable, so ties keep catalog order
    hits.sort(key=lambda h: -h.score)
    return hits


def search_budget_items(items: Iterable[BudgetItem], query: Optional[str],
                        limit: int = MAX_SEARCH_RESULTS) -> list[SearchHit]:
    """Budget items matching *query*, best first, at most *limit*."""
    if not normalize_query(query):
        return []
    hits = []
    for item in items:
        score = calculate_relevance_score(item.id, item.name, query)
        if score > 0:
            hits.append(SearchHit(item, score))
    return _rank(hits)[:limit]


def parse_categories(raw: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated category filter; None when nothing usable is given."""
    if not raw:
        return None
    categories = [c.strip().lower() for c in raw.split(",") if c.strip()]
    return categories or None


def search_units(units: Iterable[ComparisonUnit], query: Optional[str],
                 categories: Optional[Iterable[str]] = None,
                 limit: int = MAX_SEARCH_RESULTS) -> tuple[list[SearchHit], int]:
    """Units matching *query* on id, name or description.

    Description-only matches score ``DESCRIPTION_MATCH_SCORE``. When
    *categories* is given only units in those categories are considered.

    Returns:
        ``(hits, total)`` where *total* counts all matches before the cap.
    """
    q = normalize_query(query)
    if not q:
        return [], 0
    allowed = {c.lower() for c in categories} if categories else None

    hits = []
    for unit in units:
        if allowed is not None and unit.category.lower() not in allowed:
            continue
        score = calculate_relevance_score(unit.id, unit.name, q)
        if score == 0 and unit.name_singular.lower() != unit.name.lower():
            score = calculate_relevance_score(unit.id, unit.name_singular, q)
        if score == 0 and unit.description and q in unit.description.lower():
            score = DESCRIPTION_MATCH_SCORE
        if score > 0:
            hits.append(SearchHit(unit, score))
    ranked = _rank(hits)
    return ranked[:limit], len(ranked)
