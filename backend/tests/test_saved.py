"""Tests for the saved-place registry and persisted preferences."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from models import PlaceRecord, SavedRecord
from preferences import Preferences, empty_saved_message, heading
from saved import SavedRegistry, to_saved
from storage import MemoryStore, Repository


def rec(pid, name="Blue Bottle"):
    return SavedRecord(id=pid, name=name, rating=4.4)


def test_add_and_list_in_insertion_order():
    registry = SavedRegistry(Repository(MemoryStore()))
    assert registry.add("cafe", rec("p1"))
    assert registry.add("cafe", rec("p2"))
    assert [r.id for r in registry.list("cafe")] == ["p1", "p2"]


def test_duplicate_id_not_added_twice():
    registry = SavedRegistry(Repository(MemoryStore()))
    assert registry.add("cafe", rec("p1"))
    assert not registry.add("cafe", rec("p1", name="Renamed"))
    assert len(registry.list("cafe")) == 1
    assert registry.list("cafe")[0].name == "Blue Bottle"


def test_lists_are_per_type():
    registry = SavedRegistry(Repository(MemoryStore()))
    registry.add("cafe", rec("p1"))
    assert registry.add("bar", rec("p1"))
    assert registry.list("park") == []


def test_remove():
    registry = SavedRegistry(Repository(MemoryStore()))
    registry.add("cafe", rec("p1"))
    registry.add("cafe", rec("p2"))
    registry.remove("cafe", "p1")
    assert [r.id for r in registry.list("cafe")] == ["p2"]
    registry.remove("cafe", "missing")
    assert [r.id for r in registry.list("cafe")] == ["p2"]


def test_to_saved_prefers_resolved_photo_url():
    place = PlaceRecord(place_id="x", name="X", rating=None, photo="/api/photo?ref=r&max=520")
    assert to_saved(place).photo_url == "/api/photo?ref=r&max=520"
    assert to_saved(place, "http://h/api/photo?ref=r").photo_url == "http://h/api/photo?ref=r"


def test_preference_defaults_and_persistence():
    repo = Repository(MemoryStore())
    prefs = Preferences(repo)
    assert prefs.current_type == "cafe"
    assert prefs.view_mode == "find"
    assert prefs.theme == "light"

    prefs.current_type = "bakery"
    prefs.view_mode = "saved"
    assert prefs.toggle_theme() == "dark"

    reloaded = Preferences(repo)
    assert reloaded.current_type == "bakery"
    assert reloaded.view_mode == "saved"
    assert reloaded.theme == "dark"
    assert reloaded.toggle_theme() == "light"


def test_unknown_view_mode_rejected():
    with pytest.raises(ValueError):
        Preferences(Repository(MemoryStore())).view_mode = "grid"


def test_headings():
    h = heading("cafe")
    assert h.title == "☕ Cafés near you"
    assert h.subtitle == "Find and save the best cafés nearby."
    assert h.document_title == "Cafés near you • Cafe Curator"

    h = heading("park", "saved")
    assert h.title == "🌳 Saved Parks"
    assert h.document_title == "Saved Parks • Cafe Curator"

    assert heading("zoo").title == "📍 Places near you"


def test_empty_saved_message():
    assert empty_saved_message("bar") == "No saved bars yet 😢"
    assert empty_saved_message("zoo") == "No saved places yet 😢"
