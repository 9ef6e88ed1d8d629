"""
Favorites endpoints.

GET    /api/v1/favorites                         → saved comparisons, newest first
POST   /api/v1/favorites                         → save (or re-save) a comparison
POST   /api/v1/favorites/toggle                  → flip saved state
DELETE /api/v1/favorites?budgetId=&unitId=       → remove one
DELETE /api/v1/favorites/all                     → remove every favorite
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_catalog, get_favorites
from api.models import FavoriteIn, FavoriteOut, FavoritesResponse, ToggleResponse
from catalog.loader import Catalog
from stores.favorites import Favorite, FavoritesStore
from utils.share import encode_comparison

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["favorites"])


def _to_out(favorite: Favorite) -> FavoriteOut:
    return FavoriteOut(
        budget_id=favorite.budget_id,
        unit_id=favorite.unit_id,
        saved_at=favorite.saved_at,
        share_id=encode_comparison(favorite.budget_id, favorite.unit_id),
    )


def _check_known(catalog: Catalog, body: FavoriteIn) -> None:
    if catalog.get_item(body.budget_id) is None:
        raise HTTPException(status_code=404, detail=f"Budget item '{body.budget_id}' not found")
    if catalog.get_unit(body.unit_id) is None:
        raise HTTPException(status_code=404, detail=f"Comparison unit '{body.unit_id}' not found")


@router.get("", response_model=FavoritesResponse, summary="List favorites")
def list_favorites(store: FavoritesStore = Depends(get_favorites)) -> FavoritesResponse:
    favorites = store.snapshot()
    return FavoritesResponse(
        favorites=[_to_out(f) for f in favorites],
        total=len(favorites),
        max_items=store.max_items,
    )


@router.post("", response_model=FavoriteOut, status_code=201, summary="Save a favorite")
def add_favorite(
    body: FavoriteIn,
    store: FavoritesStore = Depends(get_favorites),
    catalog: Catalog = Depends(get_catalog),
) -> FavoriteOut:
    """Save a comparison; saving it again moves it to the top."""
    _check_known(catalog, body)
    favorite = store.add(body.budget_id, body.unit_id)
    logger.info("favorite_added budget_id=%s unit_id=%s", body.budget_id, body.unit_id)
    return _to_out(favorite)


@router.post("/toggle", response_model=ToggleResponse, summary="Toggle a favorite")
def toggle_favorite(
    body: FavoriteIn,
    store: FavoritesStore = Depends(get_favorites),
    catalog: Catalog = Depends(get_catalog),
) -> ToggleResponse:
    _check_known(catalog, body)
    saved = store.toggle(body.budget_id, body.unit_id)
    return ToggleResponse(budget_id=body.budget_id, unit_id=body.unit_id, is_favorite=saved)


@router.delete("/all", status_code=204, summary="Remove all favorites")
def clear_favorites(store: FavoritesStore = Depends(get_favorites)) -> None:
    store.clear()


@router.delete("", status_code=204, summary="Remove a favorite")
def remove_favorite(
    budget_id: str = Query(..., alias="budgetId", min_length=1),
    unit_id: str = Query(..., alias="unitId", min_length=1),
    store: FavoritesStore = Depends(get_favorites),
) -> None:
    if not store.remove(budget_id, unit_id):
        raise HTTPException(
            status_code=404,
            detail=f"Favorite '{encode_comparison(budget_id, unit_id)}' not found",
        )
