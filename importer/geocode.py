import logging
from typing import Any, Dict, NamedTuple, Optional

import requests

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
UNKNOWN_LOCATION = "Unknown"


class Coordinates(NamedTuple):
    lat: float
    lng: float


ZERO = Coordinates(0.0, 0.0)


class Geocoder:
    """
    Resolves free-text locations with the Google Geocoding API.
    Returns (0, 0) without a key, for empty input, on failure, or when nothing matches.
    """

    def __init__(self, api_key: str, session: Optional[requests.Session] = None, timeout: float = 10):
        self.api_key = api_key
        # an injected session belongs to the caller and is left open
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "Geocoder":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def geocode(self, location: Optional[str]) -> Coordinates:
        location = (location or "").strip()
        if not self.api_key or not location:
            return ZERO
        params = {"address": location, "key": self.api_key}
        try:
            response = self.session.get(GEOCODE_URL, params=params, timeout=self.timeout)
            data = response.json()
            results = data.get("results") or []
            if not results:
                logger.info(f"No geocoding result for '{location}' (status {data.get('status')})")
                return ZERO
            loc = results[0]["geometry"]["location"]
            return Coordinates(float(loc["lat"]), float(loc["lng"]))
        except Exception as e:
            logger.error(f"Error in geocoding location '{location}': {e}")
            return ZERO


def enrich_company(record: Dict[str, Any], geocoder: Geocoder) -> Dict[str, Any]:
    """Fills HQ and per-site coordinates in place; sites are looked up one after another."""
    hq_location = record.get("headquarters_location", "")
    hq = geocoder.geocode(hq_location) if hq_location != UNKNOWN_LOCATION else ZERO
    record["hq_lat"], record["hq_lng"] = hq
    record["lat"], record["long"] = hq

    manu_lats, manu_lngs = [], []
    for location in record.get("manufacturing_locations", []):
        site = geocoder.geocode(location)
        manu_lats.append(site.lat)
        manu_lngs.append(site.lng)
    record["manu_lats"] = manu_lats
    record["manu_lngs"] = manu_lngs
    return record
