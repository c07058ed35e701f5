"""One-shot position providers."""

import logging
import os
from abc import ABC, abstractmethod

from models import Coordinates

logger = logging.getLogger(__name__)


class LocationUnavailable(Exception):
    """Position could not be read (denied, timed out or failed)."""


class GeolocationUnsupported(LocationUnavailable):
    """No position source is available at all."""


class GeolocationProvider(ABC):
    @abstractmethod
    async def current_position(self) -> Coordinates: ...


class StaticGeolocation(GeolocationProvider):
    def __init__(self, lat: float, lng: float) -> None:
        self.position = Coordinates(lat=lat, lng=lng)

    async def current_position(self) -> Coordinates:
        return self.position


class UnavailableGeolocation(GeolocationProvider):
    async def current_position(self) -> Coordinates:
        raise GeolocationUnsupported("no position source configured")


def provider_from_env() -> GeolocationProvider:
    """Fixed position from CURATOR_LAT / CURATOR_LNG, if both are set and numeric."""
    lat, lng = os.getenv("CURATOR_LAT"), os.getenv("CURATOR_LNG")
    if not lat or not lng:
        return UnavailableGeolocation()
    try:
        return StaticGeolocation(float(lat), float(lng))
    except ValueError:
        logger.warning("Ignoring non-numeric CURATOR_LAT/CURATOR_LNG: %r, %r", lat, lng)
        return UnavailableGeolocation()
