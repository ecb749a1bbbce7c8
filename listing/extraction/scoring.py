"""Heuristic scoring of business-name candidates."""

import logging
import re
from typing import Sequence, Tuple

logger = logging.getLogger(__name__)

# First keyword contained in the name wins, so order is significant.
KEYWORD_POINTS: Tuple[Tuple[str, int], ...] = (
    ("coffee", 7),
    ("food park", 8),
    ("coffee shop", 7),
    ("restaurant", 6),
    ("market", 5),
    ("center", 4),
    ("plaza", 4),
    ("cafe", 5),
    ("grill", 5),
    ("bar", 4),
)

_STARTS_UPPER = re.compile(r"^[A-Z]")
_SIGNAGE_CAPS = re.compile(r"^[A-Z\s&\-'.]+$")


def position_score(position: int) -> int:
    return max(0, 10 - position)


def length_score(name: str) -> int:
    words = name.split(" ")
    if len(words) == 2:
        return 5
    if len(words) == 3:
        return 4
    if len(words) == 1 and len(name) > 4:
        return 3
    return 0


def format_score(name: str) -> int:
    score = 0
    if _STARTS_UPPER.search(name):
        score += 2
    if _SIGNAGE_CAPS.search(name):
        score += 3
    return score


def keyword_score(name: str) -> int:
    lowered = name.lower()
    for keyword, points in KEYWORD_POINTS:
        if keyword in lowered:
            return points
    return 0


def completeness_score(name: str) -> int:
    return 3 if 8 <= len(name) <= 25 else 0


def length_penalty(name: str) -> int:
    penalty = 0
    if len(name) < 4:
        penalty += 3
    if len(name) > 40:
        penalty += 5
    return penalty


def score_business_name(name: str, position: int = 0) -> float:
    """Score a candidate name found at ``position`` within the cleaned lines."""
    parts = [
        position_score(position),
        length_score(name),
        format_score(name),
        keyword_score(name),
        completeness_score(name),
        -length_penalty(name),
    ]
    final = float(max(0, sum(parts)))
    logger.debug(
        "Scored %r: %.2f (position %+d, length %+d, format %+d, keyword %+d, completeness %+d, penalty %+d)",
        name,
        final,
        *parts,
    )
    return final


def candidate_position(name: str, lines: Sequence[str]) -> int:
    """Index of the line equal to the candidate's first word, or 0 when absent."""
    first_word = name.split(" ")[0]
    try:
        return list(lines).index(first_word)
    except ValueError:
        return 0
