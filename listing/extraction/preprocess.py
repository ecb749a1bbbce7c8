"""Cleanup of raw OCR lines before business-name candidates are generated."""

import logging
import re
from typing import Iterable, List

logger = logging.getLogger(__name__)

STOPLIST = ("our", "menu", "hours", "open", "closed", "welcome", "visit", "call", "phone", "email")

_DIGITS_ONLY = re.compile(r"^[0-9]+$")
_LATIN_LETTER = re.compile(r"[a-zA-Z]")


def split_lines(text: str) -> List[str]:
    """Split an OCR text blob on newlines, dropping blank lines."""
    return [line for line in (text or "").split("\n") if line.strip()]


def rejection_reasons(line: str) -> List[str]:
    """Return why a trimmed line is noise. An empty list means keep it."""
    lower = line.lower()
    reasons = []
    if len(line) <= 1:
        reasons.append("too short")
    if lower in STOPLIST:
        reasons.append("common word")
    if lower.startswith("www"):
        reasons.append("website")
    if lower.startswith("http"):
        reasons.append("url")
    if "@" in lower:
        reasons.append("email")
    if _DIGITS_ONLY.match(line):
        reasons.append("just numbers")
    if line in ("&", "-"):
        reasons.append("just punctuation")
    if not _LATIN_LETTER.search(line):
        reasons.append("no letters")
    return reasons


def preprocess_lines(lines: Iterable[str]) -> List[str]:
    """Trim each line and keep only the ones that could be part of a name."""
    kept: List[str] = []
    for index, raw in enumerate(lines, start=1):
        line = raw.strip()
        reasons = rejection_reasons(line)
        if reasons:
            logger.debug("Line %2d %r filtered (%s)", index, line, ", ".join(reasons))
            continue
        logger.debug("Line %2d %r kept", index, line)
        kept.append(line)
    return kept
