"""Utilities for transforming Google Places responses into listing records."""

import logging
import re
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from listing.models import BusinessListing, ExtractedText, LocationOption

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not Available"
_IGNORE_TYPES = ("establishment", "point_of_interest")
_BASIC_FIELDS = (
    "place_id",
    "name",
    "formatted_address",
    "geometry",
    "types",
    "rating",
    "user_ratings_total",
    "business_status",
)


def to_location_option(result: Dict[str, Any]) -> LocationOption:
    return LocationOption(
        place_id=result.get("place_id") or "",
        name=result.get("name") or "",
        formatted_address=result.get("formatted_address"),
        rating=result.get("rating"),
        user_ratings_total=result.get("user_ratings_total"),
        business_status=result.get("business_status"),
        types=list(result.get("types") or []),
        geometry=result.get("geometry"),
    )


def option_from_payload(payload: Dict[str, Any]) -> LocationOption:
    """Rebuild a LocationOption the client sent back after the user picked one."""
    if not payload.get("place_id"):
        raise ValueError("selected location must include a place_id")
    return to_location_option(payload)


def basic_place(result: Dict[str, Any]) -> Dict[str, Any]:
    """Subset of a search hit that is safe to show when details are unavailable."""
    return {key: result.get(key) for key in _BASIC_FIELDS if result.get(key) is not None}


def format_business_hours(opening_hours: Optional[Dict[str, Any]]) -> str:
    weekday_text = (opening_hours or {}).get("weekday_text") or []
    if not weekday_text:
        return NOT_AVAILABLE
    return ", ".join(weekday_text)


def format_business_types(types: Optional[Iterable[str]]) -> str:
    readable: List[str] = []
    for type_name in types or []:
        if any(ignored in type_name for ignored in _IGNORE_TYPES):
            continue
        readable.append(re.sub(r"\b\w", lambda m: m.group(0).upper(), type_name.replace("_", " ")))
    return ", ".join(readable[:3]) or NOT_AVAILABLE


def format_price_level(price_level: Any) -> Optional[str]:
    if price_level is None:
        return None
    try:
        return "$" * (int(price_level) + 1)
    except (TypeError, ValueError):
        logger.debug("Unable to parse price_level %r", price_level)
        return None


def _first(values: Iterable[str]) -> Optional[str]:
    return next(iter(values), None)


def to_business_listing(
    place: Dict[str, Any],
    extracted: ExtractedText,
    enrichment: Optional[Dict[str, Any]] = None,
) -> BusinessListing:
    """Merge a Places record with what was read off the image."""
    enrichment = enrichment or {}
    location = (place.get("geometry") or {}).get("location") or {}
    sources = ["ocr", "google_places"]
    if enrichment:
        sources.append("website")

    return BusinessListing(
        name=place.get("name") or _first(extracted.business_names) or "",
        address=place.get("formatted_address") or _first(extracted.addresses),
        phone=(
            place.get("international_phone_number")
            or place.get("formatted_phone_number")
            or _first(extracted.phone_numbers)
            or _first(enrichment.get("phones") or [])
        ),
        website=place.get("website") or _first(extracted.websites),
        email=_first(extracted.emails) or _first(enrichment.get("emails") or []),
        rating=place.get("rating"),
        review_count=place.get("user_ratings_total"),
        price_level=format_price_level(place.get("price_level")),
        business_status=place.get("business_status"),
        hours=format_business_hours(place.get("opening_hours")),
        categories=format_business_types(place.get("types")),
        latitude=location.get("lat"),
        longitude=location.get("lng"),
        place_id=place.get("place_id"),
        socials=dict(enrichment.get("socials") or {}),
        sources=sources,
        raw_place=place,
    )


def listing_from_text(extracted: ExtractedText) -> BusinessListing:
    """Listing built from OCR data alone."""
    return BusinessListing(
        name=_first(extracted.business_names) or "",
        address=_first(extracted.addresses),
        phone=_first(extracted.phone_numbers),
        website=_first(extracted.websites),
        email=_first(extracted.emails),
        sources=["ocr"],
    )


def listing_payload(listing: BusinessListing) -> Dict[str, Any]:
    payload = asdict(listing)
    payload.pop("raw_place", None)
    return payload
