"""Static catalogs of comparison units and budget items."""

from catalog.models import (
    BudgetCategory,
    BudgetItem,
    BudgetTree,
    ComparisonCalculation,
    ComparisonUnit,
    FeaturedComparison,
    FormattedComparison,
)
from catalog.loader import (
    Catalog,
    get_catalog,
    load_catalog,
    normalize_budget_item,
    normalize_category,
    normalize_unit,
)

__all__ = [
    "BudgetCategory",
    "BudgetItem",
    "BudgetTree",
    "ComparisonCalculation",
    "ComparisonUnit",
    "FeaturedComparison",
    "FormattedComparison",
    "Catalog",
    "get_catalog",
    "load_catalog",
    "normalize_budget_item",
    "normalize_category",
    "normalize_unit",
]
