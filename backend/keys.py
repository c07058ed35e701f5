"""Cache key derivation: coordinates bucketed to 3 decimals (~110 m)."""

LOCATION_KEY = "cachedLocation"
CURRENT_TYPE_KEY = "currentType"
VIEW_MODE_KEY = "viewMode"
THEME_KEY = "theme"


def round3(value: float) -> str:
    """Fixed-point rendering of a coordinate to 3 decimals."""
    return f"{value:.3f}"


def result_key(place_type: str, lat: float, lng: float) -> str:
    """Key for a (type, location) result set. Nearby coordinates share a bucket."""
    return f"{place_type}:{round3(lat)},{round3(lng)}"


def results_storage_key(place_type: str, lat: float, lng: float) -> str:
    return f"nearby:{result_key(place_type, lat, lng)}"


def saved_key(place_type: str) -> str:
    return f"saved:{place_type}"
