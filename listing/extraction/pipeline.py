"""Turn raw OCR detections into an ExtractedText record."""

import logging
from typing import Callable, List, Sequence, Tuple

from listing.extraction import candidates, fields
from listing.extraction.confidence import estimate_confidence
from listing.extraction.preprocess import preprocess_lines, split_lines
from listing.extraction.ranking import rank_candidates
from listing.extraction.scoring import candidate_position, score_business_name
from listing.models import HIGH, LOW, Candidate, ConfidenceLevels, ExtractedText, NoTextDetected, RawDetection

logger = logging.getLogger(__name__)

STRATEGIES: Tuple[Tuple[str, Callable[[Sequence[str]], List[str]]], ...] = (
    ("context", candidates.context_candidates),
    ("positional", candidates.positional_candidates),
    ("pattern", candidates.pattern_candidates),
)


def generate_candidates(lines: Sequence[str]) -> List[Candidate]:
    """Run every strategy over the cleaned lines and score what they propose."""
    generated: List[Candidate] = []
    for strategy, generate in STRATEGIES:
        names = generate(lines)
        logger.debug("Strategy %s produced %d candidates", strategy, len(names))
        for name in names:
            score = score_business_name(name, candidate_position(name, lines))
            generated.append(Candidate(name=name, strategy=strategy, score=score))
    return generated


def extract_business_names(text: str) -> List[str]:
    """Top three business names inferred from an OCR text blob."""
    lines = preprocess_lines(split_lines(text))
    scored = generate_candidates(lines)
    names = rank_candidates(scored)
    logger.debug("Business names from %d lines and %d candidates: %s", len(lines), len(scored), names)
    return names


def extract_text(detections: Sequence[RawDetection]) -> ExtractedText:
    """Build the full extraction result for one OCR response."""
    if not detections:
        raise NoTextDetected()

    full_text = detections[0].text
    business_names = extract_business_names(full_text)
    addresses = fields.extract_addresses(full_text)
    phone_numbers = fields.extract_phone_numbers(full_text)
    websites = fields.extract_websites(full_text)
    emails = fields.extract_emails(full_text)
    other_text = fields.other_text_lines(full_text, [*phone_numbers, *websites, *emails])
    confidence = estimate_confidence(detections, business_names)

    logger.info(
        "Extracted names=%s addresses=%d phones=%d websites=%d emails=%d confidence=%s",
        business_names,
        len(addresses),
        len(phone_numbers),
        len(websites),
        len(emails),
        confidence.business_name,
    )
    return ExtractedText(
        business_names=tuple(business_names),
        addresses=tuple(addresses),
        phone_numbers=tuple(phone_numbers),
        websites=tuple(websites),
        emails=tuple(emails),
        other_text=tuple(other_text),
        confidence=confidence,
    )


def manual_extracted_text(business_name: str) -> ExtractedText:
    """Extraction stand-in for a name the user typed instead of uploading a photo."""
    name = (business_name or "").strip()
    if not name:
        raise ValueError("A business name is required")
    return ExtractedText(
        business_names=(name,),
        confidence=ConfidenceLevels(business_name=HIGH, address=LOW, phone=LOW),
    )
