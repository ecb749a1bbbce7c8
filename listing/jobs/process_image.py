"""CLI job that turns a storefront photo (or a typed name) into a business listing."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from listing.core.config import Settings, get_settings
from listing.core.places_lookup import MULTIPLE, fetch_selected_location, lookup_business
from listing.core.site_enricher import enrich_website
from listing.core.workflow import Event, Step, event_after_lookup, step_after_extraction, transition
from listing.etl.transform import (
    basic_place,
    listing_from_text,
    listing_payload,
    option_from_payload,
    to_business_listing,
)
from listing.extraction.pipeline import extract_text, manual_extracted_text
from listing.models import ExtractedText, NoTextDetected
from listing.vendors import google_vision

logger = logging.getLogger(__name__)


def extract_from_image(image_bytes: bytes, settings: Optional[Settings] = None) -> ExtractedText:
    settings = settings or get_settings()
    detections = google_vision.detect_text(image_bytes, settings.google_vision_api_key)
    return extract_text(detections)


def _with_name_first(extracted: ExtractedText, business_name: str) -> ExtractedText:
    others = tuple(name for name in extracted.business_names if name != business_name)
    return ExtractedText(
        business_names=(business_name, *others),
        addresses=extracted.addresses,
        phone_numbers=extracted.phone_numbers,
        websites=extracted.websites,
        emails=extracted.emails,
        other_text=extracted.other_text,
        confidence=extracted.confidence,
    )


def process_business(
    extracted: ExtractedText,
    *,
    business_name: Optional[str] = None,
    address: Optional[str] = None,
    selected_location: Optional[Dict[str, Any]] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """Look the business up and assemble the listing payload for the client.

    The returned payload always carries ``nextStep``: ``results`` when a listing
    was built, ``location-selection`` when the user has to pick among several
    places, and ``upload`` when nothing was found.
    """
    settings = settings or get_settings()
    business_name = (business_name or next(iter(extracted.business_names), "")).strip()
    if not business_name:
        raise ValueError("A business name is required")
    extracted = _with_name_first(extracted, business_name)

    if selected_location:
        option = option_from_payload(selected_location)
        logger.info("Fetching details for selected location %s (%s)", option.name, option.place_id)
        lookup = fetch_selected_location(option, settings=settings)
    else:
        if address is None:
            address = next(iter(extracted.addresses), None)
        lookup = lookup_business(business_name, address, settings=settings)

    next_step = transition(Step.PROCESSING, event_after_lookup(lookup))
    metadata: Dict[str, Any] = {
        "processed_at": datetime.now(timezone.utc).isoformat(),
        "confidence": extracted.confidence.business_name,
        "query": lookup.query,
    }

    if not lookup.found:
        logger.warning("No location found for %s", business_name)
        ocr_only = listing_from_text(extracted)
        return {
            "success": False,
            "error": f"No location found for {business_name}",
            "businessData": listing_payload(ocr_only),
            "nextStep": next_step.value,
            "metadata": {**metadata, "sources_used": ocr_only.sources},
        }

    if lookup.status == MULTIPLE:
        fallback = to_business_listing(basic_place(asdict(lookup.options[0])), extracted)
        return {
            "success": True,
            "businessData": listing_payload(fallback),
            "hasMultipleLocations": True,
            "locationOptions": [asdict(option) for option in lookup.options],
            "nextStep": next_step.value,
            "metadata": {
                **metadata,
                "sources_used": fallback.sources,
                "multipleLocationsCount": len(lookup.options),
            },
        }

    place = lookup.place or {}
    enrichment: Dict[str, Any] = {}
    if settings.enrich_websites:
        enrichment = enrich_website(place.get("website") or next(iter(extracted.websites), None))
    listing = to_business_listing(place, extracted, enrichment)
    logger.info("Built listing for %s from %s", listing.name, ", ".join(listing.sources))
    return {
        "success": True,
        "businessData": listing_payload(listing),
        "hasMultipleLocations": False,
        "nextStep": next_step.value,
        "metadata": {**metadata, "sources_used": listing.sources, "details_enriched": lookup.enriched},
    }


def run_job(args: argparse.Namespace, settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    step = Step.UPLOAD

    if args.name:
        step = transition(step, Event.MANUAL_NAME_SUBMITTED)
        extracted = manual_extracted_text(args.name)
    else:
        step = transition(step, Event.IMAGE_SUBMITTED)
        image_bytes = Path(args.image).read_bytes()
        extracted = extract_from_image(image_bytes, settings)
        step = step_after_extraction(extracted, step)

    if step == Step.CONFIRMATION:
        if not args.yes or not extracted.business_names:
            logger.info("Business name needs confirmation; re-run with --yes or --name")
            return {"success": True, "text": extracted.to_payload(), "nextStep": step.value}
        step = transition(step, Event.NAME_CONFIRMED)

    result = process_business(extracted, address=args.address, settings=settings)
    if result.get("hasMultipleLocations") and args.place_id:
        selected = next((o for o in result["locationOptions"] if o["place_id"] == args.place_id), None)
        if selected is None:
            raise ValueError(f"place id {args.place_id} is not among the location options")
        result = process_business(extracted, selected_location=selected, settings=settings)
    result["text"] = extracted.to_payload()
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a business listing from a storefront photo")
    parser.add_argument("image", nargs="?", help="Path to the storefront or sign photo")
    parser.add_argument("--name", help="Business name to use instead of reading it from an image")
    parser.add_argument("--address", help="Address to narrow the Places search")
    parser.add_argument("--place-id", dest="place_id", help="Pick this place when several locations match")
    parser.add_argument("--yes", action="store_true", help="Accept the top detected name without confirmation")
    return parser


def main(argv: Optional[list] = None) -> int:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.image and not args.name:
        parser.error("an image path or --name is required")

    try:
        result = run_job(args, settings)
    except NoTextDetected as exc:
        logger.error("%s", exc)
        return 1

    json.dump(result, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0 if result.get("success") else 1


if __name__ == "__main__":
    raise SystemExit(main())
