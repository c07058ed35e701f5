"""Google Places client (legacy Nearby Search + Photo) used by the proxy.

The API key never leaves the server: results are mapped to a small record
shape and photos are referenced through our own /api/photo route.
"""

import logging
from urllib.parse import quote

import httpx

import config

logger = logging.getLogger(__name__)


class PlacesConfigError(RuntimeError):
    """Server has no upstream credential."""


class PlacesUpstreamError(Exception):
    """Places API answered with a non-OK status."""

    def __init__(self, status: str, message: str | None = None):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


def _require_key() -> str:
    if not config.GOOGLE_API_KEY:
        raise PlacesConfigError("Server is missing GOOGLE_API_KEY")
    return config.GOOGLE_API_KEY


def _photo_path(ref: str, max_width: int = config.PHOTO_MAX_WIDTH) -> str:
    return f"/api/photo?ref={quote(ref, safe='')}&max={max_width}"


def _parse_place(result: dict) -> dict:
    photos = result.get("photos") or []
    photo_ref = (photos[0] or {}).get("photo_reference") if photos else None
    return {
        "place_id": result.get("place_id", ""),
        "name": result.get("name", ""),
        "rating": result.get("rating"),
        "vicinity": result.get("vicinity") or "",
        "photoRef": photo_ref,
        "photo": _photo_path(photo_ref) if photo_ref else None,
    }


async def search_nearby(
    lat: float,
    lng: float,
    place_type: str,
    radius: int = config.SEARCH_RADIUS_M,
    client: httpx.AsyncClient | None = None,
) -> list[dict]:
    """Nearby Search around lat/lng. ZERO_RESULTS is an empty list, not an error."""
    params = {
        "key": _require_key(),
        "location": f"{lat},{lng}",
        "radius": radius,
        "type": place_type,
    }
    if client is not None:
        resp = await client.get(config.NEARBY_SEARCH_URL, params=params)
    else:
        async with httpx.AsyncClient(timeout=config.UPSTREAM_TIMEOUT_S) as c:
            resp = await c.get(config.NEARBY_SEARCH_URL, params=params)
    resp.raise_for_status()

    data = resp.json()
    status = data.get("status", "")
    if status == "ZERO_RESULTS":
        return []
    if status != "OK":
        logger.error("Places Nearby status=%s: %s", status, data.get("error_message", ""))
        raise PlacesUpstreamError(status, data.get("error_message") or "Unknown error from Google")
    return [_parse_place(p) for p in data.get("results", [])]


async def fetch_photo(
    ref: str,
    max_width: int = config.PHOTO_MAX_WIDTH,
    client: httpx.AsyncClient | None = None,
) -> tuple[bytes, str]:
    """Photo bytes and content type. The Photo API answers with a redirect."""
    params = {"key": _require_key(), "maxwidth": max_width, "photo_reference": ref}
    if client is not None:
        resp = await client.get(config.PHOTO_URL, params=params, follow_redirects=True)
    else:
        async with httpx.AsyncClient(timeout=config.UPSTREAM_TIMEOUT_S, follow_redirects=True) as c:
            resp = await c.get(config.PHOTO_URL, params=params)
    resp.raise_for_status()
    return resp.content, resp.headers.get("content-type", "image/jpeg")
