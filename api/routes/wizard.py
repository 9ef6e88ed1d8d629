"""
Priorities wizard endpoints.

GET /api/v1/wizard/categories                         → priority and wasteful areas
GET /api/v1/wizard?priorities=&wasteful=&top=         → personalized comparisons

``priorities`` and ``wasteful`` are comma-separated category ids; ``top``
defaults to the first priority.
"""

import math

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_service
from api.models import (
    BudgetItemOut,
    UnitOut,
    WizardCategoriesResponse,
    WizardCategoryOut,
    WizardComparisonOut,
    WizardResponse,
)
from engine.relevance import parse_categories
from engine.service import ComparisonService
from engine.wizard import PRIORITY_CATEGORIES, WASTEFUL_CATEGORIES
from utils.formatting import format_number

router = APIRouter(prefix="/wizard", tags=["wizard"])


def _check_known(values: list[str], known: dict[str, str], param: str) -> None:
    unknown = [v for v in values if v not in known]
    if unknown:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown {param}: {', '.join(unknown)}. Valid values: {', '.join(known)}",
        )


@router.get("/categories", response_model=WizardCategoriesResponse,
            summary="Wizard priority and wasteful categories")
def list_wizard_categories() -> WizardCategoriesResponse:
    return WizardCategoriesResponse(
        priorities=[WizardCategoryOut(id=k, name=v) for k, v in PRIORITY_CATEGORIES.items()],
        wasteful=[WizardCategoryOut(id=k, name=v) for k, v in WASTEFUL_CATEGORIES.items()],
    )


@router.get("", response_model=WizardResponse, summary="Personalized wizard comparisons")
def wizard_comparisons(
    priorities: str | None = Query(None, description="Comma-separated priority categories (required)"),
    wasteful: str | None = Query(None, description="Comma-separated wasteful categories (required)"),
    top: str | None = Query(None, description="Top priority; defaults to the first priority"),
    service: ComparisonService = Depends(get_service),
) -> WizardResponse:
    """Price wasteful-area budget items in priority-area units (top 5)."""
    priority_list = parse_categories(priorities)
    wasteful_list = parse_categories(wasteful)
    if not priority_list or not wasteful_list:
        raise HTTPException(
            status_code=400,
            detail="Both priorities and wasteful must name at least one category",
        )
    _check_known(priority_list, PRIORITY_CATEGORIES, "priorities")
    _check_known(wasteful_list, WASTEFUL_CATEGORIES, "wasteful")

    top_priority = top.strip().lower() if top and top.strip() else priority_list[0]
    if top_priority not in priority_list:
        raise HTTPException(status_code=400, detail="top must be one of the selected priorities")

    comparisons = service.wizard(priority_list, wasteful_list, top_priority)
    return WizardResponse(
        priorities=priority_list,
        wasteful=wasteful_list,
        top_priority=top_priority,
        comparisons=[
            WizardComparisonOut(
                budget_item=BudgetItemOut.from_item(c.item),
                unit=UnitOut.from_unit(c.unit),
                unit_count=c.count,
                formatted_count=format_number(math.floor(c.count)),
                headline=c.headline,
                is_top_priority=c.is_top_priority,
                priority_category=c.priority_category,
                wasteful_category=c.wasteful_category,
            )
            for c in comparisons
        ],
        total=len(comparisons),
    )
