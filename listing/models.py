"""Core data models shared by the OCR extraction and listing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

HIGH = "High"
MEDIUM = "Medium"
LOW = "Low"
LEVELS = (HIGH, MEDIUM, LOW)


class NoTextDetected(RuntimeError):
    """The image produced zero text detections."""

    def __init__(self, message: str = "No text detected in image") -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class RawDetection:
    """One OCR observation. The first detection of a result set holds the full text."""

    text: str
    confidence: float = 0.0
    has_bounding_box: bool = False


@dataclass(slots=True)
class Candidate:
    """A proposed business name and the strategy that produced it."""

    name: str
    strategy: str
    score: float = 0.0


@dataclass(frozen=True, slots=True)
class ConfidenceLevels:
    business_name: str = LOW
    address: str = LOW
    phone: str = LOW

    def to_payload(self) -> Dict[str, str]:
        return {"businessName": self.business_name, "address": self.address, "phone": self.phone}

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "ConfidenceLevels":
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ValueError("confidence must be an object")

        def _level(key: str) -> str:
            level = payload.get(key) or LOW
            if level not in LEVELS:
                raise ValueError(f"confidence.{key} must be one of {', '.join(LEVELS)}")
            return level

        return cls(business_name=_level("businessName"), address=_level("address"), phone=_level("phone"))


@dataclass(frozen=True, slots=True)
class ExtractedText:
    """Everything the pipeline could read off one image."""

    business_names: Tuple[str, ...] = ()
    addresses: Tuple[str, ...] = ()
    phone_numbers: Tuple[str, ...] = ()
    websites: Tuple[str, ...] = ()
    emails: Tuple[str, ...] = ()
    other_text: Tuple[str, ...] = ()
    confidence: ConfidenceLevels = field(default_factory=ConfidenceLevels)

    def to_payload(self) -> Dict[str, Any]:
        """Serialise using the camelCase keys the web client expects."""
        return {
            "businessNames": list(self.business_names),
            "addresses": list(self.addresses),
            "phoneNumbers": list(self.phone_numbers),
            "websites": list(self.websites),
            "emails": list(self.emails),
            "otherText": list(self.other_text),
            "confidence": self.confidence.to_payload(),
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ExtractedText":
        """Rebuild a record the client sent back. Malformed fields raise ValueError."""
        if not isinstance(payload, dict):
            raise ValueError("extractedText must be an object")

        def _strings(key: str) -> Tuple[str, ...]:
            values = payload.get(key)
            if values is None:
                return ()
            if not isinstance(values, (list, tuple)):
                raise ValueError(f"{key} must be a list of strings")
            return tuple(str(item) for item in values if item)

        return cls(
            business_names=_strings("businessNames"),
            addresses=_strings("addresses"),
            phone_numbers=_strings("phoneNumbers"),
            websites=_strings("websites"),
            emails=_strings("emails"),
            other_text=_strings("otherText"),
            confidence=ConfidenceLevels.from_payload(payload.get("confidence")),
        )


@dataclass(slots=True)
class LocationOption:
    """Lightly normalized Places search hit offered to the user for selection."""

    place_id: str
    name: str
    formatted_address: Optional[str] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    business_status: Optional[str] = None
    types: List[str] = field(default_factory=list)
    geometry: Optional[Dict[str, Any]] = None


@dataclass(slots=True)
class BusinessListing:
    """Display-ready business record assembled from Places, OCR and website data."""

    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    price_level: Optional[str] = None
    business_status: Optional[str] = None
    hours: str = "Not Available"
    categories: str = "Not Available"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_id: Optional[str] = None
    socials: Dict[str, List[str]] = field(default_factory=dict)
    sources: List[str] = field(default_factory=list)
    raw_place: Optional[Dict[str, Any]] = field(default=None, repr=False)
