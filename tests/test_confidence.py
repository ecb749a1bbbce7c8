import pytest

from listing.extraction import confidence
from listing.models import RawDetection


def _detections(count, text="word"):
    if count == 0:
        return []
    return [RawDetection(text)] + [RawDetection("w", 0.9, True) for _ in range(count - 1)]


def test_maximum_confidence_is_clamped():
    detections = _detections(12, "one two three four five six seven eight")

    score = confidence.confidence_score(detections, ["Blue Bottle", "Open Daily"])
    levels = confidence.estimate_confidence(detections, ["Blue Bottle", "Open Daily"])

    assert score == 0.95
    assert levels.business_name == "High"
    assert levels.address == "High"
    assert levels.phone == "Medium"


def test_no_names_and_few_detections_is_low():
    levels = confidence.estimate_confidence(_detections(1, "A B"), [])

    assert confidence.confidence_score(_detections(1, "A B"), []) == 0.5
    assert (levels.business_name, levels.address, levels.phone) == ("Low", "Low", "Low")


def test_single_name_with_some_detections():
    detections = _detections(6, "Blue Bottle Coffee")
    levels = confidence.estimate_confidence(detections, ["Blue Bottle"])

    assert confidence.confidence_score(detections, ["Blue Bottle"]) == 0.8
    assert (levels.business_name, levels.address, levels.phone) == ("High", "Medium", "Medium")


@pytest.mark.parametrize(
    "score, level",
    [(0.95, "High"), (0.71, "High"), (0.7, "Medium"), (0.51, "Medium"), (0.5, "Low"), (0.3, "Low")],
)
def test_confidence_level_thresholds(score, level):
    assert confidence.confidence_level(score) == level


def test_confidence_score_stays_in_range():
    for count in range(0, 15):
        for names in ([], ["a"], ["a", "b"], ["a", "b", "c"]):
            for text in ("", "one", "one two three four five"):
                score = confidence.confidence_score(_detections(count, text), names)
                assert 0.5 <= score <= 0.95
