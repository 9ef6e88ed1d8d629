"""Flat export records for CSV/JSON downloads.

Each builder turns catalog records (or a computed comparison) into plain
dicts with a fixed column order, ready for ``csv.DictWriter`` or
``json.dumps``. Dollar columns come in pairs: the raw number and a
full-precision display string (``"$842,000,000,000"``).
"""

from typing import Iterable, Optional

from catalog.hierarchy import get_ancestors
from catalog.models import BudgetCategory, BudgetItem, ComparisonUnit, FormattedComparison
from utils.formatting import format_currency

COMPARISON_COLUMNS = [
    "title", "spendingItem", "dollarAmount", "formattedAmount", "unitName",
    "unitCost", "unitCount", "comparisonText", "category", "source", "exportedAt",
]

BUDGET_ITEM_COLUMNS = [
    "id", "name", "amount", "formattedAmount", "tier", "parentId", "fiscalYear",
    "percentOfParent", "yearOverYearChange", "level",
]

UNIT_COLUMNS = [
    "id", "name", "nameSingular", "category", "costPerUnit", "formattedCost",
    "period", "description", "source",
]

CATEGORY_COLUMNS = [
    "id", "name", "parentName", "level", "categoryType", "allocated",
    "formattedAllocated", "spent", "formattedSpent", "changeFromPriorYear",
    "description",
]


def _dollars(amount: float) -> str:
    return format_currency(amount, compact=False, show_cents=False)


def export_comparison(item: BudgetItem, unit: ComparisonUnit,
                      result: FormattedComparison, exported_at: str,
                      title: Optional[str] = None) -> dict:
    """One comparison as an export record; *title* defaults to "Custom Comparison"."""
    return {
        "title": title or "Custom Comparison",
        "spendingItem": item.name,
        "dollarAmount": item.amount,
        "formattedAmount": _dollars(item.amount),
        "unitName": unit.name,
        "unitCost": unit.cost_per_unit,
        "unitCount": result.count,
        "comparisonText": result.display_string,
        "category": unit.category,
        "source": item.source or unit.source,
        "exportedAt": exported_at,
    }


def budget_item_rows(items: Iterable[BudgetItem]) -> list[dict]:
    """Budget items with their depth in the ``parent_id`` tree (roots are 0)."""
    items = list(items)
    return [
        {
            "id": item.id,
            "name": item.name,
            "amount": item.amount,
            "formattedAmount": _dollars(item.amount),
            "tier": item.tier,
            "parentId": item.parent_id,
            "fiscalYear": item.fiscal_year,
            "percentOfParent": item.percent_of_parent,
            "yearOverYearChange": item.year_over_year_change,
            "level": len(get_ancestors(item, items)),
        }
        for item in items
    ]


def unit_rows(units: Iterable[ComparisonUnit]) -> list[dict]:
    return [
        {
            "id": unit.id,
            "name": unit.name,
            "nameSingular": unit.name_singular,
            "category": unit.category,
            "costPerUnit": unit.cost_per_unit,
            "formattedCost": format_currency(unit.cost_per_unit, compact=False),
            "period": unit.period or "unit",
            "description": unit.description or "",
            "source": unit.source or "",
        }
        for unit in units
    ]


def category_rows(categories: Iterable[BudgetCategory], level: int = 0,
                  parent_name: str = "") -> list[dict]:
    """Flatten the category hierarchy depth-first, parents before children."""
    rows = []
    for category in categories:
        rows.append({
            "id": category.id,
            "name": category.name,
            "parentName": parent_name,
            "level": level,
            "categoryType": category.category_type,
            "allocated": category.allocated,
            "formattedAllocated": _dollars(category.allocated),
            "spent": category.spent,
            "formattedSpent": _dollars(category.spent),
            "changeFromPriorYear": category.change_from_prior_year,
            "description": category.description or "",
        })
        if category.subcategories:
            rows.extend(category_rows(category.subcategories, level + 1, category.name))
    return rows
