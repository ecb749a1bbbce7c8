"""Collapse overlapping candidates and pick the best business names."""

import logging
from typing import List, Sequence

from listing.models import Candidate

logger = logging.getLogger(__name__)

MAX_BUSINESS_NAMES = 3


def _overlaps(existing: str, candidate: str) -> bool:
    return existing in candidate or candidate in existing


def remove_similar_candidates(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Keep the first candidate of every group whose texts contain one another."""
    unique: List[Candidate] = []
    for candidate in candidates:
        lowered = candidate.name.lower()
        duplicate_of = next((kept for kept in unique if _overlaps(kept.name.lower(), lowered)), None)
        if duplicate_of is not None:
            logger.debug("Dropping duplicate %r (similar to %r)", candidate.name, duplicate_of.name)
            continue
        unique.append(candidate)
    return unique


def rank_candidates(candidates: Sequence[Candidate], limit: int = MAX_BUSINESS_NAMES) -> List[str]:
    """Deduplicate, then return the top names by score. Ties keep generation order."""
    unique = remove_similar_candidates(candidates)
    ranked = sorted(unique, key=lambda candidate: candidate.score, reverse=True)
    for rank, candidate in enumerate(ranked, start=1):
        logger.debug("Rank %2d: %r -> %.2f points", rank, candidate.name, candidate.score)
    return [candidate.name for candidate in ranked[:limit]]
