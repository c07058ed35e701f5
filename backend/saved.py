"""Saved places, one list per place type."""

import logging

from keys import saved_key
from models import PlaceRecord, SavedList, SavedRecord
from storage import Repository

logger = logging.getLogger(__name__)


def to_saved(place: PlaceRecord, photo_url: str | None = None) -> SavedRecord:
    return SavedRecord(
        id=place.id,
        name=place.name,
        photo_url=photo_url if photo_url is not None else place.photo_url,
        rating=place.rating,
    )


class SavedRegistry:
    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def list(self, place_type: str) -> list[SavedRecord]:
        saved = self.repo.get(saved_key(place_type), SavedList)
        return saved.items if saved else []

    def add(self, place_type: str, record: SavedRecord) -> bool:
        """Append unless the id is already saved for this type. Returns True if added."""
        items = self.list(place_type)
        if any(r.id == record.id for r in items):
            return False
        items.append(record)
        self.repo.set(saved_key(place_type), SavedList(items=items))
        logger.info("Saved %s to %s", record.id, place_type)
        return True

    def remove(self, place_type: str, place_id: str) -> None:
        items = [r for r in self.list(place_type) if r.id != place_id]
        self.repo.set(saved_key(place_type), SavedList(items=items))
