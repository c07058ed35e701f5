"""Tests for the key-value stores and the versioned repository."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from models import LocationCacheEntry, Preference
from storage import LibsqlStore, MemoryStore, Repository


def test_memory_store_roundtrip():
    store = MemoryStore()
    assert store.get("a") is None
    store.set("a", "1")
    assert store.get("a") == "1"
    store.delete("a")
    assert store.get("a") is None


def test_libsql_store_persists(tmp_path):
    path = str(tmp_path / "state.db")
    store = LibsqlStore(path)
    store.init()
    store.set("theme", "dark")
    store.set("theme", "light")

    reopened = LibsqlStore(path)
    reopened.init()
    assert reopened.get("theme") == "light"
    reopened.delete("theme")
    assert reopened.get("theme") is None


def test_repository_writes_envelope():
    store = MemoryStore()
    repo = Repository(store)
    repo.set("cachedLocation", LocationCacheEntry(lat=1.5, lng=2.5, timestamp=10))

    raw = json.loads(store.get("cachedLocation"))
    assert raw == {"v": 1, "data": {"lat": 1.5, "lng": 2.5, "timestamp": 10}}
    assert repo.get("cachedLocation", LocationCacheEntry) == LocationCacheEntry(lat=1.5, lng=2.5, timestamp=10)


def test_repository_ignores_other_schema_version(caplog):
    store = MemoryStore()
    store.set("cachedLocation", json.dumps({"v": 99, "data": {"lat": 1, "lng": 2, "timestamp": 3}}))
    with caplog.at_level("WARNING"):
        assert Repository(store).get("cachedLocation", LocationCacheEntry) is None
    assert "cachedLocation" in caplog.text


def test_repository_ignores_legacy_unversioned_value():
    store = MemoryStore()
    store.set("cachedLocation", json.dumps({"lat": 1, "lng": 2, "timestamp": 3}))
    assert Repository(store).get("cachedLocation", LocationCacheEntry) is None


def test_repository_ignores_shape_drift():
    store = MemoryStore()
    store.set("theme", json.dumps({"v": 1, "data": {"mode": "dark"}}))
    assert Repository(store).get("theme", Preference) is None


def test_repository_ignores_garbage():
    store = MemoryStore()
    store.set("theme", "dark")
    assert Repository(store).get("theme", Preference) is None
