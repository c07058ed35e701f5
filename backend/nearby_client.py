"""Client for the nearby-search proxy (GET /api/nearby)."""

import logging
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError

import config
from models import NearbyResponse, PlaceRecord

logger = logging.getLogger(__name__)


class NearbySearchFailed(Exception):
    """Proxy answered with a non-2xx status."""

    def __init__(self, status_code: int, error: str | None = None,
                 status: str | None = None, message: str | None = None):
        self.status_code = status_code
        self.error = error
        self.status = status
        self.message = message
        super().__init__(f"HTTP {status_code}: {error} ({status}: {message})")


class NearbyUnreachable(Exception):
    """Transport-level failure talking to the proxy."""


class NearbyClient:
    def __init__(
        self,
        base_url: str = config.CURATOR_API_URL,
        radius: int = config.SEARCH_RADIUS_M,
        client: httpx.AsyncClient | None = None,
        timeout: float = config.UPSTREAM_TIMEOUT_S,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.radius = radius
        self._client = client
        self._timeout = timeout

    async def search(self, place_type: str, lat: float, lng: float) -> list[PlaceRecord]:
        params = {"type": place_type, "lat": lat, "lng": lng, "radius": self.radius}
        url = urljoin(self.base_url, "api/nearby")
        try:
            if self._client is not None:
                resp = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error("Nearby proxy unreachable: %s", e)
            raise NearbyUnreachable(str(e)) from e

        if not resp.is_success:
            body = _error_body(resp)
            raise NearbySearchFailed(
                resp.status_code, body.get("error"), body.get("status"), body.get("message"),
            )
        try:
            return NearbyResponse.model_validate(resp.json()).results
        except (ValueError, ValidationError) as e:
            logger.error("Invalid nearby proxy response: %s", e)
            raise NearbySearchFailed(resp.status_code, "Invalid response from proxy") from e

    def photo_url(self, place: PlaceRecord) -> str | None:
        """Absolute URL for a place's proxied photo, if it has one."""
        if not place.photo_url:
            return None
        return urljoin(self.base_url, place.photo_url.lstrip("/"))


def _error_body(resp: httpx.Response) -> dict:
    try:
        body = resp.json()
    except ValueError:
        return {"error": resp.text or None}
    return body if isinstance(body, dict) else {}
