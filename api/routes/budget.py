"""
Budget item endpoints.

GET /api/v1/budget?fiscalYear=&level=        → category hierarchy, depth-limited
GET /api/v1/budget/search?q=                 → budget items ranked by relevance
GET /api/v1/budget/items?tier=&parentId=     → budget items, optionally filtered
GET /api/v1/budget/items/{item_id}           → one item with ancestors and children
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_catalog, get_config
from api.models import (
    BudgetCategoryOut,
    BudgetHierarchyResponse,
    BudgetItemDetail,
    BudgetItemOut,
    BudgetSearchResponse,
    BudgetSearchResult,
)
from catalog.hierarchy import get_ancestors, limit_depth, percent_of_parent, total_allocated
from catalog.loader import Catalog
from engine.relevance import search_budget_items
from utils.config import BUDGET_TIERS, AppConfig
from utils.formatting import format_currency, format_per_capita
from utils.share import budget_url
from utils.strings import normalize_whitespace

router = APIRouter(prefix="/budget", tags=["budget"])


def _parse_int(value: str | None) -> int | None:
    try:
        return int(value) if value else None
    except ValueError:
        return None


@router.get(
    "",
    response_model=BudgetHierarchyResponse,
    response_model_exclude_none=True,
    summary="Budget category hierarchy",
)
def get_budget_hierarchy(
    fiscal_year_param: str | None = Query(None, alias="fiscalYear",
                                          description="Fiscal year (2000-2100)"),
    level_param: str | None = Query(None, alias="level",
                                    description="Maximum depth; 1 = top level only"),
    catalog: Catalog = Depends(get_catalog),
) -> BudgetHierarchyResponse:
    """Return the budget category tree for a fiscal year.

    Without ``fiscalYear`` the latest available year is returned. ``level``
    prunes the tree; nodes at the last kept level carry no subcategories.
    """
    fiscal_year = _parse_int(fiscal_year_param)
    if fiscal_year_param and (fiscal_year is None or not 2000 <= fiscal_year <= 2100):
        raise HTTPException(
            status_code=400,
            detail="Fiscal year must be a number between 2000 and 2100",
        )
    available = catalog.fiscal_years()
    if fiscal_year is None:
        if not available:
            raise HTTPException(status_code=404, detail="No budget hierarchy data available")
        fiscal_year = available[-1]
    elif fiscal_year not in catalog.categories:
        raise HTTPException(
            status_code=404,
            detail=(
                f"Budget data for fiscal year {fiscal_year} is not available. "
                f"Available: {', '.join(str(y) for y in available) or 'none'}"
            ),
        )
    level = _parse_int(level_param)
    if level_param and (level is None or level < 1):
        raise HTTPException(status_code=400, detail="Level must be a positive number")

    categories = catalog.categories[fiscal_year]
    if level is not None:
        categories = limit_depth(categories, level)

    return BudgetHierarchyResponse(
        fiscal_year=fiscal_year,
        total=total_allocated(categories),
        categories=[BudgetCategoryOut.from_category(c) for c in categories],
    )


@router.get("/search", response_model=BudgetSearchResponse, summary="Search budget items")
def search_budget(
    q: str | None = Query(None, description="Search text matched against item ids and names"),
    catalog: Catalog = Depends(get_catalog),
) -> BudgetSearchResponse:
    """Rank budget items by relevance to ``q`` (max 20).

    An empty query is not an error; it simply matches nothing.
    """
    query = normalize_whitespace(q or "")
    hits = search_budget_items(catalog.budget_items, query)
    results = [
        BudgetSearchResult(
            id=hit.record.id, name=hit.record.name,
            amount=hit.record.amount, tier=hit.record.tier, score=hit.score,
        )
        for hit in hits
    ]
    return BudgetSearchResponse(results=results, query=query, total=len(results))


@router.get("/items", response_model=list[BudgetItemOut], summary="List budget items")
def list_budget_items(
    tier: str | None = Query(None, description="department | program | current-event"),
    parent_id: str | None = Query(None, alias="parentId", description="Only children of this item"),
    catalog: Catalog = Depends(get_catalog),
) -> list[BudgetItemOut]:
    """Return budget items in catalog order, optionally filtered."""
    if tier is not None and tier.lower() not in BUDGET_TIERS:
        raise HTTPException(
            status_code=400,
            detail=f"tier must be one of: {sorted(BUDGET_TIERS)}",
        )
    items = catalog.budget_items
    if tier is not None:
        items = catalog.items_by_tier(tier)
    if parent_id is not None:
        items = [i for i in items if i.parent_id == parent_id]
    return [BudgetItemOut.from_item(i) for i in items]


@router.get("/items/{item_id}", response_model=BudgetItemDetail, summary="Get one budget item")
def get_budget_item(
    item_id: str,
    catalog: Catalog = Depends(get_catalog),
    config: AppConfig = Depends(get_config),
) -> BudgetItemDetail:
    """Return a budget item with its ancestors (root first) and direct children."""
    item = catalog.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Budget item '{item_id}' not found")
    ancestors = get_ancestors(item, catalog.budget_items)
    path = "/".join([a.id for a in ancestors] + [item.id])
    return BudgetItemDetail(
        item=BudgetItemOut.from_item(item),
        formatted_amount=format_currency(item.amount),
        per_capita=format_per_capita(item.amount),
        percent_of_parent=percent_of_parent(item, catalog.budget_items),
        ancestors=[BudgetItemOut.from_item(a) for a in ancestors],
        children=[BudgetItemOut.from_item(c) for c in catalog.items_by_parent(item.id)],
        share_url=budget_url(path, config.base_url),
    )
