"""Business-name candidate generators.

Each strategy reads the cleaned line list and returns plain name strings in the
order it found them. Scoring and deduplication happen later, so a strategy may
emit overlapping or repeated strings.
"""

import logging
import re
from typing import List, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)

# Declaration order matters: the first group a window satisfies wins.
CATEGORY_INDICATORS: Tuple[Tuple[str, ...], ...] = (
    ("coffee",),
    ("food", "park"),
    ("coffee", "shop"),
    ("restaurant",),
    ("market",),
    ("center",),
    ("plaza",),
    ("cafe",),
    ("grill",),
    ("bar",),
)

NAME_SHAPES: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("proper case two words", re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+$")),
    ("all caps two words", re.compile(r"^[A-Z]+ [A-Z]+$")),
    ("proper case three words", re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+ [A-Z][a-z]+$")),
    ("all caps three words", re.compile(r"^[A-Z]+ [A-Z]+ [A-Z]+$")),
)

CONTEXT_WINDOW = 4
CONTEXT_MAX_LENGTH = 50
POSITIONAL_LINES = 5
PATTERN_WINDOW = 3
PATTERN_MAX_LENGTH = 35


def _windows(lines: Sequence[str], start: int, size: int) -> List[str]:
    """Concatenations of lines[start:end] for every end up to ``size`` lines away."""
    stop = min(start + size, len(lines))
    return [" ".join(lines[start:end]) for end in range(start + 1, stop + 1)]


def context_candidates(lines: Sequence[str]) -> List[str]:
    """Windows of up to four lines that mention a known business category."""
    found: List[str] = []
    for start in range(len(lines)):
        for combined in _windows(lines, start, CONTEXT_WINDOW):
            if len(combined) >= CONTEXT_MAX_LENGTH:
                continue
            lowered = combined.lower()
            for words in CATEGORY_INDICATORS:
                if all(word in lowered for word in words):
                    logger.debug("Context match %r (contains: %s)", combined, " + ".join(words))
                    found.append(combined)
                    break
    return found


def positional_candidates(lines: Sequence[str]) -> List[str]:
    """Single lines and short runs taken from the top of the sign."""
    found: List[str] = []
    count = len(lines)
    for i in range(min(count, POSITIONAL_LINES)):
        line = lines[i]
        if 4 <= len(line) <= 15:
            found.append(line)
        if i < count - 1:
            pair = f"{line} {lines[i + 1]}"
            if len(pair) <= 30:
                found.append(pair)
        if i < count - 2:
            triple = f"{line} {lines[i + 1]} {lines[i + 2]}"
            if len(triple) <= 40:
                found.append(triple)
    return found


def pattern_candidates(lines: Sequence[str]) -> List[str]:
    """Windows of up to three lines shaped like a two or three word name."""
    found: List[str] = []
    for start in range(len(lines) - 1):
        for combined in _windows(lines, start, PATTERN_WINDOW):
            if len(combined) > PATTERN_MAX_LENGTH:
                continue
            for label, shape in NAME_SHAPES:
                if shape.search(combined):
                    logger.debug("Pattern match %r (%s)", combined, label)
                    found.append(combined)
                    break
    return found
