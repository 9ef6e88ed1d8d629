"""Lightweight in-memory TTL cache for comparison results.

Comparisons are pure functions of ``(amount, unit_id)`` over static catalogs,
so repeated requests for the same pairing can be served from memory.  The
cache is an optimization only; every entry can be recomputed at any time.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    """Thread-safe in-memory cache with time-to-live (TTL) expiry.

    Entries expire after ``ttl_seconds`` seconds. A maximum of ``maxsize``
    entries are retained; when the cache is full the entry expiring soonest
    is evicted.

    Usage::

        cache = TTLCache(maxsize=1024, ttl_seconds=300)
        result = cache.get_or_compute((amount, unit.id), lambda: compute())
    """

    def __init__(self, maxsize: int = 1024, ttl_seconds: float = 300.0) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        # key -> (value, expires_at)
        self._store: dict[Any, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: Any) -> Any | None:
        """Return cached value for *key*, or ``None`` if absent or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                self._misses += 1
                return None
            self._hits += 1
            return value

    def set(self, key: Any, value: Any) -> None:
        """Store *value* under *key* with the configured TTL."""
        expires_at = time.monotonic() + self._ttl
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                oldest_key = min(self._store, key=lambda k: self._store[k][1])
                del self._store[oldest_key]
            self._store[key] = (value, expires_at)

    def get_or_compute(self, key: Any, factory: Callable[[], Any]) -> Any:
        """Return the cached value for *key*, computing and storing it on a miss.

        ``factory`` runs outside the lock; two concurrent misses may both
        compute, which is harmless for pure computations.
        """
        value = self.get(key)
        if value is None:
            value = factory()
            self.set(key, value)
        return value

    def delete(self, key: Any) -> None:
        """Remove a single entry (no-op if not present)."""
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        """Remove all entries and reset the hit/miss counters."""
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        """Return ``hits``, ``misses`` and live ``size``."""
        with self._lock:
            now = time.monotonic()
            expired = [k for k, (_, exp) in self._store.items() if now > exp]
            for k in expired:
                del self._store[k]
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._store),
            }
