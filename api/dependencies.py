"""
FastAPI dependencies for the API.

Shared objects (catalog, comparison service, favorites store, config) are
created once in ``create_app()`` and stored on ``app.state``. Routes pull
them in via ``Depends()``, which keeps them swappable in tests.
"""

from fastapi import Request

from catalog.loader import Catalog
from engine.service import ComparisonService
from stores.favorites import FavoritesStore
from utils.config import AppConfig


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_service(request: Request) -> ComparisonService:
    return request.app.state.service


def get_favorites(request: Request) -> FavoritesStore:
    return request.app.state.favorites


def get_config(request: Request) -> AppConfig:
    return request.app.state.config
