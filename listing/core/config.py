"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}
LOCATION_OPTIONS_LIMIT = 10


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str
    google_vision_api_key: str
    worker_port: int = 9000
    max_location_options: int = 10
    max_upload_bytes: int = 5 * 1024 * 1024
    enrich_websites: bool = False
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "")
    google_vision_api_key = os.getenv("GOOGLE_VISION_API_KEY") or os.getenv("GOOGLE_API_KEY", "")
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    max_location_options = min(int(os.getenv("MAX_LOCATION_OPTIONS", "10")), LOCATION_OPTIONS_LIMIT)
    max_upload_bytes = int(os.getenv("MAX_UPLOAD_MB", "5")) * 1024 * 1024
    enrich_websites = os.getenv("ENRICH_WEBSITES", "false").lower() in _TRUTHY
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    if not google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; Places lookups will report no location found.")
    if not google_vision_api_key:
        logger.warning("GOOGLE_VISION_API_KEY is not configured; text detection requests will fail.")

    return Settings(
        google_places_api_key=google_places_api_key,
        google_vision_api_key=google_vision_api_key,
        worker_port=worker_port,
        max_location_options=max_location_options,
        max_upload_bytes=max_upload_bytes,
        enrich_websites=enrich_websites,
        log_level=log_level,
    )
