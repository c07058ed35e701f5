import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Read key from either GOOGLE_API_KEY or API_KEY
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY", "")
if not GOOGLE_API_KEY:
    logger.warning("No GOOGLE_API_KEY or API_KEY configured; search and photo requests will fail.")

# --- Upstream (Google Places, legacy endpoints) ---
NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
UPSTREAM_TIMEOUT_S = float(os.getenv("UPSTREAM_TIMEOUT_S", "10"))

# --- Server ---
PORT = int(os.getenv("PORT", "8080"))
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:8080,http://127.0.0.1:5500,http://localhost:5500,"
    "http://localhost:5173,http://localhost:3000",
).split(",")
FRONTEND_DIR = os.getenv("FRONTEND_DIR", "")

# --- Client ---
CURATOR_API_URL = os.getenv("CURATOR_API_URL", f"http://localhost:{PORT}")
STORE_PATH = os.getenv("STORE_PATH", "curator.db")

# --- Search ---
SEARCH_RADIUS_M = 1500
PHOTO_MAX_WIDTH = 520
DEFAULT_PLACE_TYPE = "cafe"

# --- Caching & rate limiting (milliseconds) ---
LOCATION_TTL_MS = 10 * 60 * 1000   # location cache
RESULT_TTL_MS = 5 * 60 * 1000      # results cache
REQUEST_GAP_MS = 2500              # min gap between searches
WATCHDOG_MS = 8000                 # safety reset for a hung request
GEOLOCATION_TIMEOUT_S = 8.0
