"""Regex extractors for contact details found anywhere in the OCR text."""

import logging
import re
from typing import Iterable, List, Pattern

logger = logging.getLogger(__name__)

ADDRESS_REGEX = re.compile(
    r"[0-9]+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Lane|Ln|Drive|Dr|Way|Court|Ct)",
    re.IGNORECASE,
)
PHONE_REGEX = re.compile(r"(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}")
WEBSITE_REGEX = re.compile(r"(?:https?://)?(?:www\.)?[a-zA-Z0-9][a-zA-Z0-9-]{1,61}[a-zA-Z0-9]\.[a-zA-Z]{2,}")
EMAIL_REGEX = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def _find_all(pattern: Pattern[str], text: str) -> List[str]:
    return [match.group(0) for match in pattern.finditer(text or "")]


def extract_addresses(text: str) -> List[str]:
    matches = _find_all(ADDRESS_REGEX, text)
    logger.debug("Address extraction: %d found", len(matches))
    return matches


def extract_phone_numbers(text: str) -> List[str]:
    matches = _find_all(PHONE_REGEX, text)
    logger.debug("Phone extraction: %d found", len(matches))
    return matches


def extract_websites(text: str) -> List[str]:
    matches = _find_all(WEBSITE_REGEX, text)
    logger.debug("Website extraction: %d found", len(matches))
    return matches


def extract_emails(text: str) -> List[str]:
    matches = _find_all(EMAIL_REGEX, text)
    logger.debug("Email extraction: %d found", len(matches))
    return matches


def other_text_lines(text: str, matched: Iterable[str]) -> List[str]:
    """Lines of the blob that carry none of the phone, website or email matches."""
    matched = [value for value in matched if value]
    lines = (line.strip() for line in (text or "").split("\n"))
    return [line for line in lines if line and not any(value in line for value in matched)]
