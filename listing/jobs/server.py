"""HTTP entrypoint for the storefront listing generator (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

import requests
from flask import Flask, jsonify, request

from listing.core.config import get_settings
from listing.core.workflow import Event, Step, step_after_extraction, transition
from listing.jobs.process_image import extract_from_image, process_business
from listing.models import ExtractedText, NoTextDetected
from listing.vendors.google_vision import GoogleVisionError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint that only reads env-based settings."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": settings.worker_port,
                "places_configured": bool(settings.google_places_api_key),
                "vision_configured": bool(settings.google_vision_api_key),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/extract-text")
def extract_text_route() -> Any:
    """
    Read business details off an uploaded photo.
    Required multipart field: image (image/*, at most MAX_UPLOAD_MB)
    """
    settings = get_settings()
    upload = request.files.get("image")
    if upload is None or not upload.filename:
        return jsonify({"error": "image file is required"}), 400
    if not (upload.mimetype or "").startswith("image/"):
        return jsonify({"error": "uploaded file must be an image"}), 400

    image_bytes = upload.read()
    if not image_bytes:
        return jsonify({"error": "uploaded image is empty"}), 400
    if len(image_bytes) > settings.max_upload_bytes:
        return jsonify({"error": f"image must be at most {settings.max_upload_bytes // (1024 * 1024)}MB"}), 400

    step = transition(Step.UPLOAD, Event.IMAGE_SUBMITTED)
    try:
        extracted = extract_from_image(image_bytes, settings)
    except NoTextDetected:
        return jsonify({"error": "No text detected in image"}), 422
    except (GoogleVisionError, requests.RequestException) as exc:
        logger.exception("Text detection failed: %s", exc)
        return jsonify({"error": "Failed to extract text from image"}), 502

    next_step = step_after_extraction(extracted, step)
    return jsonify({"success": True, "text": extracted.to_payload(), "nextStep": next_step.value}), 200


@app.post("/process-business")
def process_business_route() -> Any:
    """
    Resolve extracted text to a place and build the listing.
    Required JSON fields: extractedText
    Optional: selectedLocation (one of the locationOptions returned earlier)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    extracted_payload = payload.get("extractedText")
    if not isinstance(extracted_payload, dict):
        return jsonify({"error": "extractedText is required"}), 400

    selected_location = payload.get("selectedLocation")
    if selected_location is not None and not isinstance(selected_location, dict):
        return jsonify({"error": "selectedLocation must be an object"}), 400

    try:
        extracted = ExtractedText.from_payload(extracted_payload)
        result = process_business(extracted, selected_location=selected_location)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    if not result["success"]:
        return jsonify(result), 404
    return jsonify(result), 200


def main() -> None:
    """Bind to the PORT injected by Cloud Run, falling back to WORKER_PORT locally."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    env_port = os.getenv("PORT")
    port = int(env_port or settings.worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
