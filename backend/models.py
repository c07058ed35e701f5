"""Pydantic models for proxy responses and stored client state."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    lat: float
    lng: float


class PlaceRecord(BaseModel):
    """A place as returned by the nearby proxy.

    Wire names (place_id, vicinity, photo, photoRef) and field names are both accepted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="place_id")
    name: str
    rating: float | None = None
    address: str | None = Field(default=None, alias="vicinity")
    photo_url: str | None = Field(default=None, alias="photo")
    photo_ref: str | None = Field(default=None, alias="photoRef")


class NearbyResponse(BaseModel):
    ok: bool = True
    results: list[PlaceRecord]


class ErrorResponse(BaseModel):
    error: str
    status: str | None = None
    message: str | None = None


# ---------- Stored shapes ----------
# Each stored model carries a schema_version; the repository rejects mismatches.

class LocationCacheEntry(BaseModel):
    schema_version: ClassVar[int] = 1

    lat: float
    lng: float
    timestamp: int


class ResultCacheEntry(BaseModel):
    schema_version: ClassVar[int] = 1

    timestamp: int
    data: list[PlaceRecord]


class SavedRecord(BaseModel):
    id: str
    name: str
    photo_url: str | None = None
    rating: float | None = None


class SavedList(BaseModel):
    schema_version: ClassVar[int] = 1

    items: list[SavedRecord] = Field(default_factory=list)


class Preference(BaseModel):
    schema_version: ClassVar[int] = 1

    value: str
