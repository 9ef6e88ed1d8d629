"""
Comparison unit endpoints.

GET /api/v1/units?category=              → all units, optionally one category
GET /api/v1/units/categories             → unit categories with counts
GET /api/v1/units/search?q=&category=    → units matching q; category is comma-separated
GET /api/v1/units/{unit_id}              → one unit
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_catalog
from api.models import UnitCategoryOut, UnitOut, UnitSearchResponse
from catalog.loader import Catalog
from engine.relevance import parse_categories, search_units
from utils.strings import normalize_query

router = APIRouter(prefix="/units", tags=["units"])


@router.get("", response_model=list[UnitOut], summary="List comparison units")
def list_units(
    category: str | None = Query(None, description="Only units in this category"),
    catalog: Catalog = Depends(get_catalog),
) -> list[UnitOut]:
    units = catalog.units_by_category(category) if category else catalog.units
    return [UnitOut.from_unit(u) for u in units]


@router.get("/categories", response_model=list[UnitCategoryOut], summary="List unit categories")
def list_unit_categories(catalog: Catalog = Depends(get_catalog)) -> list[UnitCategoryOut]:
    """Categories present in the unit catalog, in catalog order."""
    return [
        UnitCategoryOut(category=c, count=len(catalog.units_by_category(c)))
        for c in catalog.unit_categories()
    ]


@router.get("/search", response_model=UnitSearchResponse, summary="Search comparison units")
def search_units_endpoint(
    q: str | None = Query(None, description="Search text matched against id, name and description"),
    category: str | None = Query(None, description="Comma-separated categories to search within"),
    catalog: Catalog = Depends(get_catalog),
) -> UnitSearchResponse:
    """Rank units by relevance to ``q`` (max 20); ``total`` counts every match."""
    query = normalize_query(q)
    categories = parse_categories(category)
    hits, total = search_units(catalog.units, query, categories)
    return UnitSearchResponse(
        query=query,
        categories=categories,
        total=total,
        count=len(hits),
        units=[UnitOut.from_unit(hit.record) for hit in hits],
    )


@router.get("/{unit_id}", response_model=UnitOut, summary="Get one comparison unit")
def get_unit(unit_id: str, catalog: Catalog = Depends(get_catalog)) -> UnitOut:
    unit = catalog.get_unit(unit_id)
    if unit is None:
        raise HTTPException(status_code=404, detail=f"Comparison unit '{unit_id}' not found")
    return UnitOut.from_unit(unit)
