"""Saved (budget item, unit) comparisons.

The store keeps no module-level state: every ``FavoritesStore`` owns an
injected key-value backend, and the current snapshot always comes from that
backend. Subscribers are notified after every write.
"""

import json
import logging
import threading
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)

STORAGE_KEY = "budget-favorites"
MAX_FAVORITES = 50

Callback = Callable[[Any], None]
Unsubscribe = Callable[[], None]


class KeyValueBackend(Protocol):
    """Minimal persistence interface the favorites store needs."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def subscribe(self, key: str, callback: Callback) -> Unsubscribe: ...


class _SubscriberMixin:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callback]] = {}
        self._sub_lock = threading.Lock()

    def subscribe(self, key: str, callback: Callback) -> Unsubscribe:
        with self._sub_lock:
            self._subscribers.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            with self._sub_lock:
                callbacks = self._subscribers.get(key, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def _notify(self, key: str, value: Any) -> None:
        with self._sub_lock:
            callbacks = list(self._subscribers.get(key, []))
        for callback in callbacks:
            callback(value)


class MemoryBackend(_SubscriberMixin):
    """Process-local dict backend; contents are lost on restart."""

    def __init__(self) -> None:
        super().__init__()
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
        self._notify(key, value)


class JsonFileBackend(_SubscriberMixin):
    """Backend persisted as one JSON object per file.

    A missing or unreadable file reads as empty, so a corrupt file never
    blocks the service; the next write replaces it.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable favorites file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Any:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            tmp.replace(self.path)
        self._notify(key, value)


@dataclass(frozen=True)
class Favorite:
    budget_id: str
    unit_id: str
    saved_at: float

    @property
    def key(self) -> str:
        return favorite_key(self.budget_id, self.unit_id)


def favorite_key(budget_id: str, unit_id: str) -> str:
    return f"{budget_id}:{unit_id}"


def _parse_entries(raw: Any) -> list[Favorite]:
    if not isinstance(raw, list):
        return []
    favorites = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        budget_id = entry.get("budget_id")
        unit_id = entry.get("unit_id")
        if not budget_id or not unit_id:
            continue
        saved_at = entry.get("saved_at")
        favorites.append(Favorite(
            str(budget_id), str(unit_id),
            float(saved_at) if isinstance(saved_at, (int, float)) else 0.0,
        ))
    return favorites


class FavoritesStore:
    """Most-recent-first list of saved comparisons, capped at *max_items*.

    Args:
        backend: Key-value backend the list is persisted in.
        max_items: Oldest entries beyond this count are dropped.
        clock: Returns the current time in seconds; injectable for tests.
    """

    def __init__(self, backend: KeyValueBackend, max_items: int = MAX_FAVORITES,
                 clock: Callable[[], float] = time.time, key: str = STORAGE_KEY):
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        self.backend = backend
        self.max_items = max_items
        self.clock = clock
        self.key = key
        self._lock = threading.Lock()

    def snapshot(self) -> list[Favorite]:
        """Current favorites, most recently saved first."""
        return _parse_entries(self.backend.get(self.key))

    def _write(self, favorites: list[Favorite]) -> None:
        self.backend.set(self.key, [asdict(f) for f in favorites])

    def add(self, budget_id: str, unit_id: str) -> Favorite:
        """Save a comparison; re-adding moves it to the front with a new timestamp."""
        key = favorite_key(budget_id, unit_id)
        favorite = Favorite(budget_id, unit_id, self.clock())
        with self._lock:
            remaining = [f for f in self.snapshot() if f.key != key]
            self._write(([favorite] + remaining)[:self.max_items])
        return favorite

    def remove(self, budget_id: str, unit_id: str) -> bool:
        """Remove a comparison; returns False if it was not saved."""
        key = favorite_key(budget_id, unit_id)
        with self._lock:
            current = self.snapshot()
            remaining = [f for f in current if f.key != key]
            if len(remaining) == len(current):
                return False
            self._write(remaining)
        return True

    def is_favorite(self, budget_id: str, unit_id: str) -> bool:
        key = favorite_key(budget_id, unit_id)
        return any(f.key == key for f in self.snapshot())

    def toggle(self, budget_id: str, unit_id: str) -> bool:
        """Flip saved state; returns True when the comparison is now saved."""
        key = favorite_key(budget_id, unit_id)
        with self._lock:
            current = self.snapshot()
            remaining = [f for f in current if f.key != key]
            if len(remaining) < len(current):
                self._write(remaining)
                return False
            favorite = Favorite(budget_id, unit_id, self.clock())
            self._write(([favorite] + remaining)[:self.max_items])
        return True

    def clear(self) -> None:
        with self._lock:
            self._write([])

    def subscribe(self, callback: Callable[[list[Favorite]], None]) -> Unsubscribe:
        """Call *callback* with the new snapshot after every write."""
        return self.backend.subscribe(
            self.key, lambda raw: callback(_parse_entries(raw))
        )

    def __len__(self) -> int:
        return len(self.snapshot())


def create_favorites_store(path: Optional[Path] = None, **kwargs) -> FavoritesStore:
    """Store backed by a JSON file at *path*, or by memory when *path* is None."""
    backend: KeyValueBackend = JsonFileBackend(path) if path else MemoryBackend()
    return FavoritesStore(backend, **kwargs)
