"""Client utilities for the Google Cloud Vision text detection API."""

import base64
import logging
from typing import Any, Dict, List

import requests

from listing.models import NoTextDetected, RawDetection

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_ANNOTATE_URL = "https://vision.googleapis.com/v1/images:annotate"


class GoogleVisionError(RuntimeError):
    """Raised when the Vision API returns a non-successful response."""


class OcrNoTextDetected(GoogleVisionError, NoTextDetected):
    """Vision answered without any text annotations."""


def _to_detection(annotation: Dict[str, Any]) -> RawDetection:
    vertices = (annotation.get("boundingPoly") or {}).get("vertices") or []
    return RawDetection(
        text=annotation.get("description") or "",
        confidence=float(annotation.get("confidence") or 0.0),
        has_bounding_box=bool(vertices),
    )


def detect_text(image_bytes: bytes, api_key: str) -> List[RawDetection]:
    """Run TEXT_DETECTION on an image. The first detection is the full text blob."""
    if not api_key:
        raise RuntimeError("GOOGLE_VISION_API_KEY is required")
    if not image_bytes:
        raise ValueError("Image content is empty")

    body = {
        "requests": [
            {
                "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                "features": [{"type": "TEXT_DETECTION"}],
            }
        ]
    }
    logger.info("Calling Vision text detection for %d image bytes", len(image_bytes))
    response = _SESSION.post(_ANNOTATE_URL, params={"key": api_key}, json=body, timeout=30)
    response.raise_for_status()
    payload = response.json()

    responses = payload.get("responses") or [{}]
    result = responses[0] or {}
    error = result.get("error")
    if error:
        logger.error("detect_text failed: code=%s, message=%s", error.get("code"), error.get("message"))
        raise GoogleVisionError(error.get("message") or "Vision API error")

    detections = [_to_detection(annotation) for annotation in result.get("textAnnotations") or []]
    logger.info("Vision returned %d text detections", len(detections))
    if not detections:
        raise OcrNoTextDetected()

    for index, detection in enumerate(detections[1:], start=1):
        logger.debug(
            "%2d. %r (confidence: %.3f, position: %s)",
            index,
            detection.text,
            detection.confidence,
            "YES" if detection.has_bounding_box else "NO",
        )
    return detections
