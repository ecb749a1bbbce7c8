"""Confidence model that decides whether the user has to confirm a result."""

import logging
from typing import Sequence

from listing.models import HIGH, LOW, MEDIUM, ConfidenceLevels, RawDetection

logger = logging.getLogger(__name__)

MAX_CONFIDENCE = 0.95
ADDRESS_FACTOR = 0.8
PHONE_FACTOR = 0.7


def confidence_score(detections: Sequence[RawDetection], business_names: Sequence[str]) -> float:
    """Composite score in [0.5, 0.95] from detection count and name yield."""
    # Accumulated in hundredths so threshold comparisons are exact.
    points = 50
    if len(detections) > 5:
        points += 10
    if len(detections) > 10:
        points += 10
    if len(business_names) > 0:
        points += 20
    if len(business_names) > 1:
        points += 10
    full_text = detections[0].text if detections else ""
    if len(full_text.split()) >= 5:
        points += 10
    return min(MAX_CONFIDENCE, points / 100)


def confidence_level(score: float) -> str:
    if score > 0.7:
        return HIGH
    if score > 0.5:
        return MEDIUM
    return LOW


def estimate_confidence(detections: Sequence[RawDetection], business_names: Sequence[str]) -> ConfidenceLevels:
    score = confidence_score(detections, business_names)
    levels = ConfidenceLevels(
        business_name=confidence_level(score),
        address=confidence_level(score * ADDRESS_FACTOR),
        phone=confidence_level(score * PHONE_FACTOR),
    )
    logger.debug("Confidence %.3f -> %s", score, levels)
    return levels
