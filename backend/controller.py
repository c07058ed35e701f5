"""Cache & gate controller: every location/search request goes through here.

Flow for a user's "find" action:

1. ``resolve_location`` drops the request if the gate is closed, otherwise
   reuses a location cached within 10 minutes or asks the provider.
2. ``resolve_results`` serves a result set cached within 5 minutes for the
   same (type, rounded lat/lng) bucket without touching the gate; otherwise
   it takes the gate, calls the proxy, sorts by rating and caches.

Gated requests are dropped, not queued. Nothing is retried.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import config
from gate import AsyncioScheduler, Clock, RequestGate, Scheduler, SystemClock
from geolocation import GeolocationProvider, GeolocationUnsupported, LocationUnavailable
from keys import LOCATION_KEY, results_storage_key
from models import Coordinates, LocationCacheEntry, PlaceRecord, ResultCacheEntry
from nearby_client import NearbyClient, NearbySearchFailed, NearbyUnreachable
from storage import Repository

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No places found nearby. Try another type or try again."
LOCATION_MESSAGE = "Location access denied or unavailable."
UNSUPPORTED_MESSAGE = "Geolocation not supported on this device."
NETWORK_MESSAGE = "Search failed. Check your connection and try again."


class SearchError(Exception):
    """A search that reached the network and failed; str() is user-facing."""


class OutcomeStatus(str, Enum):
    RESULTS = "results"
    EMPTY = "empty"
    ERROR = "error"
    LOCATION_UNAVAILABLE = "location_unavailable"
    DROPPED = "dropped"


@dataclass
class FindOutcome:
    status: OutcomeStatus
    places: list[PlaceRecord] = field(default_factory=list)
    message: str | None = None
    from_cache: bool = False


def sort_by_rating(places: list[PlaceRecord]) -> list[PlaceRecord]:
    """Highest rating first; a missing rating counts as 0. Ties keep upstream order."""
    return sorted(places, key=lambda p: p.rating or 0, reverse=True)


def failure_message(exc: NearbySearchFailed) -> str:
    detail = ": ".join(x for x in (exc.status, exc.message) if x)
    msg = f"Search failed: {exc.error or f'HTTP {exc.status_code}'}"
    return f"{msg} ({detail})" if detail else msg


class CacheGateController:
    def __init__(
        self,
        repo: Repository,
        geolocation: GeolocationProvider,
        search_client: NearbyClient,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
        on_busy: Callable[[bool], None] | None = None,
        location_ttl_ms: int = config.LOCATION_TTL_MS,
        result_ttl_ms: int = config.RESULT_TTL_MS,
        geolocation_timeout_s: float = config.GEOLOCATION_TIMEOUT_S,
    ) -> None:
        self.repo = repo
        self.geolocation = geolocation
        self.search_client = search_client
        self.clock = clock or SystemClock()
        self.on_busy = on_busy
        self.location_ttl_ms = location_ttl_ms
        self.result_ttl_ms = result_ttl_ms
        self.geolocation_timeout_s = geolocation_timeout_s
        self.gate = RequestGate(
            self.clock,
            scheduler or AsyncioScheduler(),
            on_reset=lambda: self._set_busy(False),
        )

    def _set_busy(self, busy: bool) -> None:
        if self.on_busy is not None:
            self.on_busy(busy)

    def _fresh(self, timestamp: int, ttl_ms: int) -> bool:
        return self.clock.now() - timestamp < ttl_ms

    # ---------- Location ----------

    async def resolve_location(self) -> Coordinates | None:
        """Cached or freshly read position; None when the gate drops the request.

        Raises LocationUnavailable (or GeolocationUnsupported) on failure.
        """
        if not self.gate.permits():
            logger.info("Location request dropped: gate closed")
            return None

        cached = self.repo.get(LOCATION_KEY, LocationCacheEntry)
        if cached and self._fresh(cached.timestamp, self.location_ttl_ms):
            return Coordinates(lat=cached.lat, lng=cached.lng)

        try:
            pos = await asyncio.wait_for(
                self.geolocation.current_position(), timeout=self.geolocation_timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise LocationUnavailable("geolocation timed out") from e

        self.repo.set(
            LOCATION_KEY,
            LocationCacheEntry(lat=pos.lat, lng=pos.lng, timestamp=self.clock.now()),
        )
        return pos

    # ---------- Results ----------

    def cached_results(self, lat: float, lng: float, place_type: str) -> list[PlaceRecord] | None:
        entry = self.repo.get(results_storage_key(place_type, lat, lng), ResultCacheEntry)
        if entry and self._fresh(entry.timestamp, self.result_ttl_ms):
            return entry.data
        return None

    async def resolve_results(self, lat: float, lng: float, place_type: str) -> list[PlaceRecord] | None:
        """Sorted places for the bucket; None when the gate drops the request.

        Raises SearchError when the proxy call fails.
        """
        cached = self.cached_results(lat, lng, place_type)
        if cached is not None:
            logger.debug("Result cache hit for %s", results_storage_key(place_type, lat, lng))
            return cached

        if not self.gate.permits():
            logger.info("Search dropped: gate closed")
            return None

        ticket = self.gate.begin()
        self._set_busy(True)
        try:
            places = await self.search_client.search(place_type, lat, lng)
        except NearbySearchFailed as e:
            logger.error("Nearby search failed: %s", e)
            raise SearchError(failure_message(e)) from e
        except NearbyUnreachable as e:
            raise SearchError(NETWORK_MESSAGE) from e
        finally:
            if self.gate.finish(ticket):
                self._set_busy(False)

        ranked = sort_by_rating(places)
        if ranked:
            self.repo.set(
                results_storage_key(place_type, lat, lng),
                ResultCacheEntry(timestamp=self.clock.now(), data=ranked),
            )
        return ranked

    # ---------- User action ----------

    async def find(self, place_type: str) -> FindOutcome:
        try:
            pos = await self.resolve_location()
        except GeolocationUnsupported:
            return FindOutcome(OutcomeStatus.LOCATION_UNAVAILABLE, message=UNSUPPORTED_MESSAGE)
        except LocationUnavailable as e:
            logger.error("Geolocation error: %s", e)
            return FindOutcome(OutcomeStatus.LOCATION_UNAVAILABLE, message=LOCATION_MESSAGE)
        if pos is None:
            return FindOutcome(OutcomeStatus.DROPPED)

        from_cache = self.cached_results(pos.lat, pos.lng, place_type) is not None
        try:
            places = await self.resolve_results(pos.lat, pos.lng, place_type)
        except SearchError as e:
            return FindOutcome(OutcomeStatus.ERROR, message=str(e))
        if places is None:
            return FindOutcome(OutcomeStatus.DROPPED)
        if not places:
            return FindOutcome(OutcomeStatus.EMPTY, message=EMPTY_MESSAGE)
        return FindOutcome(OutcomeStatus.RESULTS, places=places, from_cache=from_cache)
