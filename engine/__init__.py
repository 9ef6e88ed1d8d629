"""Comparison engine: calculator, impact scorer, selector, alternatives, search.

``engine.service`` is not re-exported here; it depends on ``catalog.loader``,
which itself imports ``engine.errors``.
"""

from engine.errors import CatalogError, ComparisonError, InvalidUnitCostError
from engine.calculator import (
    calculate_comparison,
    create_formula,
    format_comparison_result,
    to_comparison_result,
)
from engine.scoring import impact_score, range_score, roundness_score
from engine.selector import ScoredUnit, find_best_comparison, get_alternatives, rank_units
from engine.alternatives import (
    Alternatives,
    SpendingAlternative,
    UnitAlternative,
    comparison_interest,
    format_ratio_comparison,
    generate_alternatives,
    spending_alternatives,
    unit_alternatives,
)
from engine.relevance import (
    SearchHit,
    calculate_relevance_score,
    parse_categories,
    search_budget_items,
    search_units,
)

__all__ = [
    "CatalogError",
    "ComparisonError",
    "InvalidUnitCostError",
    "calculate_comparison",
    "create_formula",
    "format_comparison_result",
    "to_comparison_result",
    "impact_score",
    "range_score",
    "roundness_score",
    "ScoredUnit",
    "find_best_comparison",
    "get_alternatives",
    "rank_units",
    "Alternatives",
    "SpendingAlternative",
    "UnitAlternative",
    "comparison_interest",
    "format_ratio_comparison",
    "generate_alternatives",
    "spending_alternatives",
    "unit_alternatives",
    "SearchHit",
    "calculate_relevance_score",
    "parse_categories",
    "search_budget_items",
    "search_units",
]
