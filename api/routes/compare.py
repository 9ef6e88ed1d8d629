"""
Comparison endpoints.

GET /api/v1/compare?budgetId=&unitId=          → one comparison (unit auto-selected if omitted)
GET /api/v1/compare/alternatives?budgetId=&unitId=&limit=
                                               → spending and unit alternatives
GET /api/v1/comparisons/{comparisonId}         → comparison from a share id ("budget:unit")
"""

import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_config, get_service
from api.models import (
    AlternativesResponse,
    BudgetItemOut,
    CompareResponse,
    ComparisonOut,
    SpendingAlternativeOut,
    UnitAlternativeOut,
    UnitOut,
)
from engine.service import ComparisonService
from utils.config import AppConfig
from utils.share import comparison_url, parse_comparison_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["compare"])


def _compare(service: ComparisonService, config: AppConfig,
             budget_id: str, unit_id: str | None) -> CompareResponse:
    if service.catalog.get_item(budget_id) is None:
        raise HTTPException(status_code=404, detail=f"Budget item '{budget_id}' not found")
    if unit_id is not None and service.catalog.get_unit(unit_id) is None:
        raise HTTPException(status_code=404, detail=f"Comparison unit '{unit_id}' not found")

    outcome = service.compare(budget_id, unit_id)
    if outcome is None:
        raise HTTPException(status_code=404, detail="No comparison units available")

    return CompareResponse(
        budget_item=BudgetItemOut.from_item(outcome.item),
        unit=UnitOut.from_unit(outcome.unit),
        comparison=ComparisonOut.from_result(outcome.result),
        auto_selected=outcome.auto_selected,
        share_id=outcome.share_id,
        share_url=comparison_url(outcome.share_id, config.base_url),
        formula=outcome.formula,
    )


@router.get("/compare", response_model=CompareResponse, summary="Compare a budget item with a unit")
def compare(
    budget_id: str | None = Query(None, alias="budgetId", description="Budget item id (required)"),
    unit_id: str | None = Query(None, alias="unitId",
                                description="Unit id; the best-scoring unit is chosen when omitted"),
    service: ComparisonService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> CompareResponse:
    """Express a budget item's amount as a count of real-world units."""
    if not budget_id or not budget_id.strip():
        raise HTTPException(status_code=400, detail="Missing required query parameter: budgetId")
    unit_id = unit_id.strip() if unit_id and unit_id.strip() else None
    return _compare(service, config, budget_id.strip(), unit_id)


@router.get(
    "/compare/alternatives",
    response_model=AlternativesResponse,
    summary="Alternative comparisons for a budget item and unit",
)
def compare_alternatives(
    budget_id: str = Query(..., alias="budgetId", min_length=1),
    unit_id: str = Query(..., alias="unitId", min_length=1),
    limit: int | None = Query(None, ge=1, le=500,
                              description="Max alternatives per list (default: all)"),
    service: ComparisonService = Depends(get_service),
) -> AlternativesResponse:
    """Other budget items in the same unit, and other units for the same item.

    Both lists are ranked; ``totalSpending`` and ``totalUnits`` report how
    many alternatives exist so clients can offer "browse all".
    """
    alternatives = service.alternatives(budget_id, unit_id)
    if alternatives is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown budget item '{budget_id}' or unit '{unit_id}'",
        )
    spending = alternatives.spending if limit is None else alternatives.spending[:limit]
    units = alternatives.units if limit is None else alternatives.units[:limit]
    return AlternativesResponse(
        budget_item_id=budget_id,
        unit_id=unit_id,
        spending=[
            SpendingAlternativeOut(
                budget_item=BudgetItemOut.from_item(a.item),
                count=a.count, formatted=a.formatted,
                ratio=a.ratio if math.isfinite(a.ratio) else None,
                interest=a.interest, comparison=a.comparison,
            )
            for a in spending
        ],
        units=[
            UnitAlternativeOut(
                unit=UnitOut.from_unit(a.unit),
                count=a.count, formatted=a.formatted, score=a.score,
            )
            for a in units
        ],
        total_spending=len(alternatives.spending),
        total_units=len(alternatives.units),
    )


@router.get(
    "/comparisons/{comparison_id}",
    response_model=CompareResponse,
    summary="Comparison by share id",
)
def get_comparison(
    comparison_id: str,
    service: ComparisonService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> CompareResponse:
    """Resolve a ``budgetId:unitId`` share id into a comparison."""
    parsed = parse_comparison_id(comparison_id)
    if parsed is None:
        raise HTTPException(
            status_code=400,
            detail="Comparison id must look like 'budgetId:unitId'",
        )
    budget_id, unit_id = parsed
    return _compare(service, config, budget_id, unit_id)
