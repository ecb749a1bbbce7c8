"""Resolve an extracted business name to a physical place.

The text search either finds nothing, exactly one place, or several. A single
hit is enriched with a details call straight away. Several hits are returned as
lightweight options and the details call is deferred until the user picks one,
so a lookup never costs more than one details request.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import requests

from listing.core.config import LOCATION_OPTIONS_LIMIT, Settings, get_settings
from listing.etl.transform import basic_place, to_location_option
from listing.models import LocationOption
from listing.vendors import google_places

logger = logging.getLogger(__name__)

NOT_FOUND = "not_found"
SINGLE = "single"
MULTIPLE = "multiple"


@dataclass(slots=True)
class PlacesLookup:
    status: str
    query: str
    place: Optional[Dict[str, Any]] = None
    enriched: bool = False
    options: List[LocationOption] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status != NOT_FOUND


def build_query(business_name: str, address: Optional[str] = None) -> str:
    name = (business_name or "").strip()
    if not name:
        raise ValueError("A business name is required for a Places lookup")
    address = (address or "").strip()
    return f"{name} {address}" if address else name


def fetch_details(place_id: str, api_key: str) -> Dict[str, Any]:
    """Details for ``place_id``, or an empty dict when the details call fails."""
    try:
        details = google_places.place_details(place_id=place_id, api_key=api_key)
    except (google_places.PlacesDetailsFailed, requests.RequestException) as exc:
        logger.warning("Failed to fetch details for %s, using search result fields: %s", place_id, exc)
        return {}
    if not details:
        logger.warning("Details for %s came back empty, using search result fields", place_id)
        return {}
    details.setdefault("place_id", place_id)
    return details


def lookup_business(
    business_name: str,
    address: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
) -> PlacesLookup:
    settings = settings or get_settings()
    query = build_query(business_name, address)
    api_key = settings.google_places_api_key
    if not api_key:
        logger.error("GOOGLE_PLACES_API_KEY is not configured; skipping lookup for query=%s", query)
        return PlacesLookup(status=NOT_FOUND, query=query)

    logger.info("Running Places text search for query=%s", query)
    try:
        response = google_places.text_search(query=query, api_key=api_key)
    except (google_places.PlacesLookupFailed, requests.RequestException) as exc:
        logger.error("Places text search failed for query=%s: %s", query, exc)
        return PlacesLookup(status=NOT_FOUND, query=query)

    results = [result for result in response.get("results", []) if result.get("place_id")]
    logger.info("Places returned %d results for query=%s", len(results), query)
    if not results:
        return PlacesLookup(status=NOT_FOUND, query=query)

    if len(results) > 1:
        limit = min(settings.max_location_options, LOCATION_OPTIONS_LIMIT)
        options = [to_location_option(result) for result in results[:limit]]
        for index, option in enumerate(options, start=1):
            logger.debug("Option %d: %s - %s", index, option.name, option.formatted_address)
        return PlacesLookup(status=MULTIPLE, query=query, options=options)

    best = results[0]
    details = fetch_details(best["place_id"], api_key)
    if details:
        return PlacesLookup(status=SINGLE, query=query, place=details, enriched=True)
    return PlacesLookup(status=SINGLE, query=query, place=basic_place(best))


def fetch_selected_location(option: LocationOption, *, settings: Optional[Settings] = None) -> PlacesLookup:
    """Enrich the option the user picked among several matches."""
    settings = settings or get_settings()
    basic = basic_place(asdict(option))
    if not settings.google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; using selected option as-is")
        return PlacesLookup(status=SINGLE, query=option.name, place=basic)

    details = fetch_details(option.place_id, settings.google_places_api_key)
    if details:
        return PlacesLookup(status=SINGLE, query=option.name, place=details, enriched=True)
    return PlacesLookup(status=SINGLE, query=option.name, place=basic)
