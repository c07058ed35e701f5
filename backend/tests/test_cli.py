"""Tests for the curator command line client."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import cli
from models import PlaceRecord
from nearby_client import NearbyClient


def run(tmp_path, *argv):
    return cli.main(["--store", str(tmp_path / "curator.db"), "--api-url", "http://proxy.test", *argv])


def test_type_and_empty_saved(tmp_path, capsys):
    assert run(tmp_path, "type", "bar") == 0
    assert run(tmp_path, "saved") == 0
    out = capsys.readouterr().out
    assert "🍸 Saved Bars" in out
    assert "No saved bars yet" in out


def test_theme_toggles(tmp_path, capsys):
    run(tmp_path, "theme")
    run(tmp_path, "theme")
    out = capsys.readouterr().out.splitlines()
    assert out == ["🌙 Dark mode", "☀️ Light mode"]


def test_find_save_and_unsave(tmp_path, capsys, monkeypatch):
    async def fake_search(self, place_type, lat, lng):
        return [
            PlaceRecord(id="p1", name="Corner Cafe", rating=4.0, photo_url="/api/photo?ref=r&max=520"),
            PlaceRecord(id="p2", name="Top Cafe", rating=4.8),
        ]

    monkeypatch.setattr(NearbyClient, "search", fake_search)
    assert run(tmp_path, "find", "--type", "cafe", "--lat", "40.0", "--lng", "-74.0", "--save", "p1", "p1") == 0
    out = capsys.readouterr().out
    assert out.index("Top Cafe") < out.index("Corner Cafe")
    assert "photo: http://proxy.test/api/photo?ref=r&max=520" in out
    assert "Corner Cafe saved to cafe!" in out
    assert "Corner Cafe is already saved in cafe." in out

    run(tmp_path, "saved")
    assert "Corner Cafe" in capsys.readouterr().out

    run(tmp_path, "unsave", "p1")
    run(tmp_path, "saved")
    assert "No saved cafés yet" in capsys.readouterr().out


def test_find_without_location(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("CURATOR_LAT", raising=False)
    monkeypatch.delenv("CURATOR_LNG", raising=False)
    assert run(tmp_path, "find") == 1
    assert "Geolocation not supported" in capsys.readouterr().out


def test_bare_command_reopens_saved_view(tmp_path, capsys):
    run(tmp_path, "type", "bar")
    run(tmp_path, "saved")
    capsys.readouterr()

    assert run(tmp_path) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "Saved Bars • Cafe Curator"
    assert "🍸 Saved Bars" in out
    assert "No saved bars yet" in out


def test_bare_command_defaults_to_find_view(tmp_path, capsys):
    assert run(tmp_path) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "Cafés near you • Cafe Curator"
    assert "Run `curator find` to search near you." in out
