"""Persisted UI preferences and the type-dependent headings."""

from dataclasses import dataclass

import config
from keys import CURRENT_TYPE_KEY, THEME_KEY, VIEW_MODE_KEY
from models import Preference
from storage import Repository

# type -> (display name, emoji)
PLACE_TYPES: dict[str, tuple[str, str]] = {
    "cafe": ("Cafés", "☕"),
    "restaurant": ("Restaurants", "🍽️"),
    "bakery": ("Bakeries", "🥐"),
    "bar": ("Bars", "🍸"),
    "library": ("Libraries", "📚"),
    "park": ("Parks", "🌳"),
}
FALLBACK_TYPE_INFO = ("Places", "📍")

VIEW_MODES = ("find", "saved")
THEMES = ("light", "dark")

APP_NAME = "Cafe Curator"


@dataclass(frozen=True)
class Heading:
    title: str
    subtitle: str
    document_title: str


def heading(place_type: str, view: str = "find") -> Heading:
    name, emoji = PLACE_TYPES.get(place_type, FALLBACK_TYPE_INFO)
    if view == "saved":
        return Heading(
            title=f"{emoji} Saved {name}",
            subtitle=f"Your favorites in {name.lower()}.",
            document_title=f"Saved {name} • {APP_NAME}",
        )
    return Heading(
        title=f"{emoji} {name} near you",
        subtitle=f"Find and save the best {name.lower()} nearby.",
        document_title=f"{name} near you • {APP_NAME}",
    )


def empty_saved_message(place_type: str) -> str:
    name = PLACE_TYPES[place_type][0].lower() if place_type in PLACE_TYPES else "places"
    return f"No saved {name} yet 😢"


class Preferences:
    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def _get(self, key: str, default: str, allowed=None) -> str:
        pref = self.repo.get(key, Preference)
        if pref is None or (allowed is not None and pref.value not in allowed):
            return default
        return pref.value

    def _set(self, key: str, value: str) -> None:
        self.repo.set(key, Preference(value=value))

    @property
    def current_type(self) -> str:
        return self._get(CURRENT_TYPE_KEY, config.DEFAULT_PLACE_TYPE)

    @current_type.setter
    def current_type(self, value: str) -> None:
        self._set(CURRENT_TYPE_KEY, value)

    @property
    def view_mode(self) -> str:
        return self._get(VIEW_MODE_KEY, "find", VIEW_MODES)

    @view_mode.setter
    def view_mode(self, value: str) -> None:
        if value not in VIEW_MODES:
            raise ValueError(f"unknown view mode: {value!r}")
        self._set(VIEW_MODE_KEY, value)

    @property
    def theme(self) -> str:
        return self._get(THEME_KEY, "light", THEMES)

    def toggle_theme(self) -> str:
        mode = "light" if self.theme == "dark" else "dark"
        self._set(THEME_KEY, mode)
        return mode
