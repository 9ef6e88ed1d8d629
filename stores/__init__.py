"""Mutable stores with injected persistence backends."""

from stores.favorites import (
    Favorite,
    FavoritesStore,
    JsonFileBackend,
    KeyValueBackend,
    MemoryBackend,
    create_favorites_store,
)

__all__ = [
    "Favorite",
    "FavoritesStore",
    "JsonFileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "create_favorites_store",
]
