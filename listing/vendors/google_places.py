"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

DETAIL_FIELDS = (
    "place_id",
    "name",
    "formatted_address",
    "international_phone_number",
    "formatted_phone_number",
    "website",
    "business_status",
    "opening_hours",
    "rating",
    "user_ratings_total",
    "price_level",
    "types",
    "geometry",
)


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


class PlacesLookupFailed(GooglePlacesError):
    """The text search itself failed."""


class PlacesDetailsFailed(GooglePlacesError):
    """The details call for an already matched place failed."""


def text_search(query: str, api_key: str) -> Dict[str, Any]:
    params = {"query": query, "key": api_key}
    response = _SESSION.get(f"{_BASE_URL}/textsearch/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        logger.error("text_search failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise PlacesLookupFailed(payload.get("error_message") or status)
    return payload


def place_details(place_id: str, api_key: str) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": ",".join(DETAIL_FIELDS)}
    response = _SESSION.get(f"{_BASE_URL}/details/json", params=params, timeout=10)
    response.raise_for_status()
    payload = response.json()
    status = payload.get("status")
    if status != "OK":
        logger.error("place_details failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise PlacesDetailsFailed(payload.get("error_message") or status)
    return payload.get("result", {})
