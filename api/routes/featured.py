"""
Featured comparisons endpoint.

GET /api/v1/featured?random=true&limit=3 → curated comparisons with computed counts
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_service
from api.models import FeaturedOut, FeaturedResponse, UnitOut
from engine.service import ComparisonService

router = APIRouter(prefix="/featured", tags=["featured"])


@router.get("", response_model=FeaturedResponse, summary="Featured comparisons")
def list_featured(
    random: bool = Query(False, description="Shuffle the comparisons"),
    limit_param: str | None = Query(None, alias="limit",
                                    description="Number of comparisons to return (default: all)"),
    service: ComparisonService = Depends(get_service),
) -> FeaturedResponse:
    """Return curated comparisons in display order, or shuffled with ``random=true``."""
    try:
        limit = int(limit_param) if limit_param else None
    except ValueError:
        limit = 0
    if limit is not None and limit < 1:
        raise HTTPException(
            status_code=400,
            detail="Invalid limit parameter. Must be a positive integer.",
        )
    outcomes = service.featured(shuffle=random, limit=limit)
    comparisons = [
        FeaturedOut(
            id=o.id,
            budget_item_id=o.item.id,
            budget_item_name=o.item.name,
            budget_amount=o.item.amount,
            unit_id=o.unit.id,
            unit=UnitOut.from_unit(o.unit),
            unit_count=o.result.count,
            formatted=o.result.display_string,
            headline=o.featured.headline,
            display_order=o.featured.display_order,
            is_featured=o.featured.is_featured,
        )
        for o in outcomes
    ]
    return FeaturedResponse(comparisons=comparisons, total=len(comparisons), shuffled=random)
