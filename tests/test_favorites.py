"""
Tests for stores/favorites.py — saved comparisons and their backends.
"""
import itertools
import json
import sys
import threading
import time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from stores.favorites import (
    MAX_FAVORITES,
    STORAGE_KEY,
    Favorite,
    FavoritesStore,
    JsonFileBackend,
    MemoryBackend,
    create_favorites_store,
    favorite_key,
)


@pytest.fixture()
def clock():
    ticks = itertools.count(1000)
    return lambda: float(next(ticks))


@pytest.fixture()
def store(clock):
    return FavoritesStore(MemoryBackend(), clock=clock)


def _keys(store):
    return [f.key for f in store.snapshot()]


class TestFavoritesStore:
    def test_starts_empty(self, store):
        assert store.snapshot() == []
        assert len(store) == 0

    def test_add_returns_favorite(self, store):
        favorite = store.add("defense", "f35")
        assert favorite == Favorite("defense", "f35", 1000.0)
        assert favorite.key == "defense:f35"
        assert store.is_favorite("defense", "f35")

    def test_newest_first(self, store):
        store.add("defense", "f35")
        store.add("nasa", "james-webb-telescope")
        assert _keys(store) == ["nasa:james-webb-telescope", "defense:f35"]

    def test_re_add_moves_to_front(self, store):
        store.add("defense", "f35")
        store.add("nasa", "james-webb-telescope")
        again = store.add("defense", "f35")
        assert _keys(store) == ["defense:f35", "nasa:james-webb-telescope"]
        assert store.snapshot()[0].saved_at == again.saved_at
        assert len(store) == 2

    def test_capped_at_max_items(self, clock):
        store = FavoritesStore(MemoryBackend(), clock=clock)
        for i in range(MAX_FAVORITES + 5):
            store.add(f"item-{i}", "f35")
        favorites = store.snapshot()
        assert len(favorites) == MAX_FAVORITES
        assert favorites[0].budget_id == f"item-{MAX_FAVORITES + 4}"
        assert not store.is_favorite("item-0", "f35")

    def test_custom_cap(self, clock):
        store = FavoritesStore(MemoryBackend(), max_items=2, clock=clock)
        for budget_id in ("a", "b", "c"):
            store.add(budget_id, "u")
        assert _keys(store) == ["c:u", "b:u"]

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            FavoritesStore(MemoryBackend(), max_items=0)

    def test_remove(self, store):
        store.add("defense", "f35")
        assert store.remove("defense", "f35") is True
        assert store.remove("defense", "f35") is False
        assert store.snapshot() == []

    def test_toggle(self, store):
        assert store.toggle("defense", "f35") is True
        assert store.is_favorite("defense", "f35")
        assert store.toggle("defense", "f35") is False
        assert not store.is_favorite("defense", "f35")

    def test_concurrent_toggles_pair_up(self):
        class SlowBackend(MemoryBackend):
            def get(self, key):
                value = super().get(key)
                time.sleep(0.001)
                return value

        store = FavoritesStore(SlowBackend())
        results = []

        def worker():
            results.append(store.toggle("defense", "f35"))

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count(True) == 5
        assert results.count(False) == 5
        assert store.snapshot() == []

    def test_clear(self, store):
        store.add("a", "u")
        store.add("b", "u")
        store.clear()
        assert len(store) == 0

    def test_pair_identity_uses_both_ids(self, store):
        store.add("defense", "f35")
        assert not store.is_favorite("defense", "coffee")
        assert not store.is_favorite("f35", "defense")


class TestSubscribers:
    def test_notified_with_snapshot(self, store):
        seen = []
        store.subscribe(seen.append)
        store.add("defense", "f35")
        store.add("nasa", "coffee")
        assert [[f.key for f in snap] for snap in seen] == [
            ["defense:f35"],
            ["nasa:coffee", "defense:f35"],
        ]

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        store.add("defense", "f35")
        unsubscribe()
        store.add("nasa", "coffee")
        assert len(seen) == 1

    def test_unsubscribe_twice_is_harmless(self, store):
        unsubscribe = store.subscribe(lambda snap: None)
        unsubscribe()
        unsubscribe()

    def test_stores_are_independent(self, clock):
        first = FavoritesStore(MemoryBackend(), clock=clock)
        second = FavoritesStore(MemoryBackend(), clock=clock)
        first.add("defense", "f35")
        assert second.snapshot() == []


class TestJsonFileBackend:
    def test_persists_across_instances(self, tmp_path, clock):
        path = tmp_path / "favorites.json"
        FavoritesStore(JsonFileBackend(path), clock=clock).add("defense", "f35")

        reopened = FavoritesStore(JsonFileBackend(path))
        assert [f.key for f in reopened.snapshot()] == ["defense:f35"]

        data = json.loads(path.read_text())
        assert data[STORAGE_KEY] == [
            {"budget_id": "defense", "unit_id": "f35", "saved_at": 1000.0},
        ]

    def test_missing_file_reads_empty(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "nope" / "favorites.json")
        assert backend.get(STORAGE_KEY) is None

    def test_corrupt_file_reads_empty(self, tmp_path, caplog):
        path = tmp_path / "favorites.json"
        path.write_text("{not json")
        store = FavoritesStore(JsonFileBackend(path))
        assert store.snapshot() == []
        assert "unreadable favorites file" in caplog.text
        store.add("defense", "f35")
        assert json.loads(path.read_text())[STORAGE_KEY][0]["unit_id"] == "f35"

    def test_malformed_entries_skipped(self, tmp_path):
        path = tmp_path / "favorites.json"
        path.write_text(json.dumps({STORAGE_KEY: [
            {"budget_id": "defense", "unit_id": "f35", "saved_at": 5},
            {"budget_id": "", "unit_id": "x"},
            "garbage",
        ]}))
        assert FavoritesStore(JsonFileBackend(path)).snapshot() == [
            Favorite("defense", "f35", 5.0),
        ]


def test_create_favorites_store(tmp_path):
    assert isinstance(create_favorites_store().backend, MemoryBackend)
    store = create_favorites_store(tmp_path / "f.json", max_items=3)
    assert isinstance(store.backend, JsonFileBackend)
    assert store.max_items == 3


def test_favorite_key():
    assert favorite_key("defense", "f35") == "defense:f35"
