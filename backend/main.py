"""FastAPI proxy for Google Places: hides the API key from the browser/CLI."""

import logging
import math
from pathlib import Path

import httpx
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

import config
import places
from places import PlacesConfigError, PlacesUpstreamError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

MAX_RADIUS_M = 50000


app = FastAPI(title="Cafe Curator Proxy", version="1.0.0")

# CORS: allow the dev origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ---------- Nearby search ----------

@app.get("/api/nearby")
async def nearby(
    place_type: str = Query("cafe", alias="type", description="Place type"),
    lat: str | None = Query(None),
    lng: str | None = Query(None),
    radius: str | None = Query(None),
):
    # Parsed here so bad input gets the same {"error": ...} shape as other failures.
    if not lat or not lng:
        return JSONResponse({"error": "lat,lng required"}, status_code=400)
    try:
        lat_f, lng_f = float(lat), float(lng)
    except ValueError:
        return JSONResponse({"error": "lat,lng must be numbers"}, status_code=400)
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return JSONResponse({"error": "lat,lng must be numbers"}, status_code=400)
    try:
        radius_m = int(radius) if radius else config.SEARCH_RADIUS_M
    except ValueError:
        radius_m = 0
    if not 1 <= radius_m <= MAX_RADIUS_M:
        return JSONResponse({"error": f"radius must be between 1 and {MAX_RADIUS_M}"}, status_code=400)

    try:
        items = await places.search_nearby(lat_f, lng_f, place_type, radius_m)
    except PlacesConfigError as e:
        return JSONResponse({"error": str(e)}, status_code=500)
    except PlacesUpstreamError as e:
        return JSONResponse(
            {"error": "Google Places error", "status": e.status, "message": e.message},
            status_code=502,
        )
    except httpx.HTTPStatusError as e:
        logger.error("Nearby upstream HTTP %d", e.response.status_code)
        return JSONResponse({"error": "Upstream failed"}, status_code=e.response.status_code)
    except httpx.HTTPError as e:
        logger.error("Nearby upstream failed: %s", e)
        return JSONResponse({"error": "Upstream failed"}, status_code=500)
    except ValueError as e:
        logger.error("Nearby upstream returned invalid JSON: %s", e)
        return JSONResponse({"error": "Upstream failed"}, status_code=500)

    return {"ok": True, "results": items}


# ---------- Photo ----------

@app.get("/api/photo")
async def photo(
    ref: str | None = Query(None),
    max_width: int = Query(config.PHOTO_MAX_WIDTH, alias="max", ge=1, le=1600),
):
    if not ref:
        return PlainTextResponse("Missing ref", status_code=400)

    try:
        content, content_type = await places.fetch_photo(ref, max_width)
    except PlacesConfigError as e:
        return PlainTextResponse(str(e), status_code=500)
    except httpx.HTTPError as e:
        logger.error("Photo fetch failed: %s", e)
        return PlainTextResponse("Photo fetch failed", status_code=500)

    return Response(content=content, media_type=content_type)


# ---------- Health check ----------

@app.get("/health")
async def health():
    return {"ok": True}


# ---------- Static frontend (optional) ----------

if config.FRONTEND_DIR and Path(config.FRONTEND_DIR).is_dir():
    app.mount("/", StaticFiles(directory=config.FRONTEND_DIR, html=True), name="frontend")
