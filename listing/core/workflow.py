"""Step transitions for the upload -> confirm -> pick location -> results flow."""

import logging
from enum import Enum
from typing import Dict, Tuple

from listing.core.places_lookup import MULTIPLE, PlacesLookup
from listing.models import LOW, ExtractedText

logger = logging.getLogger(__name__)

GENERIC_NAMES = ("business", "company", "store", "shop")
GENERIC_NAME_MAX_LENGTH = 10


class Step(str, Enum):
    UPLOAD = "upload"
    PROCESSING = "processing"
    CONFIRMATION = "confirmation"
    LOCATION_SELECTION = "location-selection"
    RESULTS = "results"


class Event(str, Enum):
    IMAGE_SUBMITTED = "image_submitted"
    MANUAL_NAME_SUBMITTED = "manual_name_submitted"
    CONFIRMATION_REQUIRED = "confirmation_required"
    NAME_CONFIRMED = "name_confirmed"
    LOCATIONS_AMBIGUOUS = "locations_ambiguous"
    LOCATION_SELECTED = "location_selected"
    LOCATION_DISMISSED = "location_dismissed"
    LISTING_READY = "listing_ready"
    FAILED = "failed"
    RETRY = "retry"


class InvalidTransition(ValueError):
    """Raised when an event is not accepted in the current step."""


_TRANSITIONS: Dict[Tuple[Step, Event], Step] = {
    (Step.UPLOAD, Event.IMAGE_SUBMITTED): Step.PROCESSING,
    (Step.UPLOAD, Event.MANUAL_NAME_SUBMITTED): Step.PROCESSING,
    (Step.PROCESSING, Event.CONFIRMATION_REQUIRED): Step.CONFIRMATION,
    (Step.PROCESSING, Event.LOCATIONS_AMBIGUOUS): Step.LOCATION_SELECTION,
    (Step.PROCESSING, Event.LISTING_READY): Step.RESULTS,
    (Step.PROCESSING, Event.FAILED): Step.UPLOAD,
    (Step.CONFIRMATION, Event.NAME_CONFIRMED): Step.PROCESSING,
    (Step.CONFIRMATION, Event.RETRY): Step.UPLOAD,
    (Step.LOCATION_SELECTION, Event.LOCATION_SELECTED): Step.PROCESSING,
    (Step.LOCATION_SELECTION, Event.LOCATION_DISMISSED): Step.RESULTS,
    (Step.LOCATION_SELECTION, Event.RETRY): Step.UPLOAD,
    (Step.RESULTS, Event.RETRY): Step.UPLOAD,
}


def transition(step: Step, event: Event) -> Step:
    step, event = Step(step), Event(event)
    try:
        next_step = _TRANSITIONS[(step, event)]
    except KeyError:
        raise InvalidTransition(f"{event.value} is not allowed during {step.value}") from None
    logger.debug("Workflow %s --%s--> %s", step.value, event.value, next_step.value)
    return next_step


def is_generic_name(name: str) -> bool:
    lowered = (name or "").lower()
    return len(lowered) < GENERIC_NAME_MAX_LENGTH and any(generic in lowered for generic in GENERIC_NAMES)


def should_request_confirmation(extracted: ExtractedText) -> bool:
    """True when the user should confirm or correct the detected business name."""
    if extracted.confidence.business_name == LOW:
        return True
    if not extracted.business_names:
        return True
    return is_generic_name(extracted.business_names[0])


def step_after_extraction(extracted: ExtractedText, step: Step = Step.PROCESSING) -> Step:
    """Move to confirmation when needed, otherwise keep processing towards the lookup."""
    if should_request_confirmation(extracted):
        return transition(step, Event.CONFIRMATION_REQUIRED)
    return step


def event_after_lookup(lookup: PlacesLookup) -> Event:
    if not lookup.found:
        return Event.FAILED
    if lookup.status == MULTIPLE:
        return Event.LOCATIONS_AMBIGUOUS
    return Event.LISTING_READY
