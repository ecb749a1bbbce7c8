import json

import pytest

from listing.core.config import Settings
from listing.core.places_lookup import MULTIPLE, NOT_FOUND, SINGLE, PlacesLookup
from listing.jobs import process_image
from listing.models import ConfidenceLevels, ExtractedText, LocationOption

SETTINGS = Settings(google_places_api_key="places-key", google_vision_api_key="vision-key")

EXTRACTED = ExtractedText(
    business_names=("JOE'S COFFEE SHOP", "Open Daily"),
    addresses=("123 Main Street",),
    websites=("www.joescoffee.com",),
    confidence=ConfidenceLevels("High", "High", "Medium"),
)

PLACE = {
    "place_id": "pid-1",
    "name": "Joe's Coffee",
    "formatted_address": "123 Main St, Springfield",
    "website": "https://joescoffee.com/",
    "types": ["cafe"],
}


def _options(count):
    return [LocationOption(place_id=f"pid-{i}", name=f"Joe's Coffee {i}", formatted_address=f"{i} Main St") for i in range(1, count + 1)]


@pytest.fixture
def lookups(monkeypatch):
    calls = {"lookup": [], "selected": [], "enrich": []}
    state = {"lookup": PlacesLookup(status=SINGLE, query="q", place=dict(PLACE), enriched=True)}

    def fake_lookup(name, address=None, *, settings=None):
        calls["lookup"].append((name, address))
        return state["lookup"]

    def fake_selected(option, *, settings=None):
        calls["selected"].append(option.place_id)
        return PlacesLookup(status=SINGLE, query=option.name, place={**PLACE, "place_id": option.place_id}, enriched=True)

    def fake_enrich(website):
        calls["enrich"].append(website)
        return {"pages_crawled": 1, "emails": ["hello@joescoffee.com"], "phones": [], "socials": {}}

    monkeypatch.setattr(process_image, "lookup_business", fake_lookup)
    monkeypatch.setattr(process_image, "fetch_selected_location", fake_selected)
    monkeypatch.setattr(process_image, "enrich_website", fake_enrich)
    calls["state"] = state
    return calls


def test_process_business_single_match(lookups):
    result = process_image.process_business(EXTRACTED, settings=SETTINGS)

    assert result["success"] is True
    assert result["hasMultipleLocations"] is False
    assert result["nextStep"] == "results"
    assert result["businessData"]["name"] == "Joe's Coffee"
    assert result["businessData"]["categories"] == "Cafe"
    assert result["metadata"]["details_enriched"] is True
    assert result["metadata"]["sources_used"] == ["ocr", "google_places"]
    assert result["metadata"]["confidence"] == "High"
    assert lookups["lookup"] == [("JOE'S COFFEE SHOP", "123 Main Street")]
    assert lookups["enrich"] == []


def test_process_business_multiple_matches(lookups):
    lookups["state"]["lookup"] = PlacesLookup(status=MULTIPLE, query="q", options=_options(3))

    result = process_image.process_business(EXTRACTED, settings=SETTINGS)

    assert result["success"] is True
    assert result["hasMultipleLocations"] is True
    assert result["nextStep"] == "location-selection"
    assert [option["place_id"] for option in result["locationOptions"]] == ["pid-1", "pid-2", "pid-3"]
    assert result["businessData"]["name"] == "Joe's Coffee 1"
    assert result["metadata"]["multipleLocationsCount"] == 3


def test_process_business_not_found(lookups):
    lookups["state"]["lookup"] = PlacesLookup(status=NOT_FOUND, query="q")

    result = process_image.process_business(EXTRACTED, settings=SETTINGS)

    assert result["success"] is False
    assert result["error"] == "No location found for JOE'S COFFEE SHOP"
    assert result["nextStep"] == "upload"
    assert result["businessData"]["name"] == "JOE'S COFFEE SHOP"
    assert result["businessData"]["address"] == "123 Main Street"
    assert result["businessData"]["website"] == "www.joescoffee.com"
    assert result["businessData"]["place_id"] is None
    assert result["metadata"]["sources_used"] == ["ocr"]


def test_process_business_with_selected_location(lookups):
    selected = {"place_id": "pid-2", "name": "Joe's Coffee 2"}

    result = process_image.process_business(EXTRACTED, selected_location=selected, settings=SETTINGS)

    assert result["nextStep"] == "results"
    assert result["businessData"]["place_id"] == "pid-2"
    assert lookups["selected"] == ["pid-2"]
    assert lookups["lookup"] == []


def test_process_business_uses_confirmed_name_and_address(lookups):
    process_image.process_business(EXTRACTED, business_name=" Open Daily ", address="Springfield", settings=SETTINGS)

    assert lookups["lookup"] == [("Open Daily", "Springfield")]


def test_process_business_enriches_website_when_enabled(lookups):
    settings = Settings(google_places_api_key="places-key", google_vision_api_key="", enrich_websites=True)

    result = process_image.process_business(EXTRACTED, settings=settings)

    assert lookups["enrich"] == ["https://joescoffee.com/"]
    assert result["businessData"]["email"] == "hello@joescoffee.com"
    assert result["metadata"]["sources_used"] == ["ocr", "google_places", "website"]


def test_process_business_requires_name(lookups):
    with pytest.raises(ValueError):
        process_image.process_business(ExtractedText(), settings=SETTINGS)


def test_run_job_with_manual_name(lookups):
    args = process_image.build_parser().parse_args(["--name", "Blue Bottle"])

    result = process_image.run_job(args, SETTINGS)

    assert result["success"] is True
    assert result["text"]["businessNames"] == ["Blue Bottle"]
    assert lookups["lookup"] == [("Blue Bottle", None)]


def test_run_job_stops_for_confirmation(monkeypatch, tmp_path, lookups):
    image = tmp_path / "sign.jpg"
    image.write_bytes(b"fake-image")
    unsure = ExtractedText(business_names=("Shop",), confidence=ConfidenceLevels("Low", "Low", "Low"))
    received = []

    def fake_extract(image_bytes, settings=None):
        received.append(image_bytes)
        return unsure

    monkeypatch.setattr(process_image, "extract_from_image", fake_extract)

    args = process_image.build_parser().parse_args([str(image)])
    result = process_image.run_job(args, SETTINGS)

    assert received == [b"fake-image"]
    assert result == {"success": True, "text": unsure.to_payload(), "nextStep": "confirmation"}
    assert lookups["lookup"] == []

    args = process_image.build_parser().parse_args([str(image), "--yes"])
    assert process_image.run_job(args, SETTINGS)["nextStep"] == "results"


def test_run_job_selects_place_id(lookups):
    lookups["state"]["lookup"] = PlacesLookup(status=MULTIPLE, query="q", options=_options(2))

    args = process_image.build_parser().parse_args(["--name", "Joe's Coffee", "--place-id", "pid-2"])
    result = process_image.run_job(args, SETTINGS)

    assert lookups["selected"] == ["pid-2"]
    assert result["businessData"]["place_id"] == "pid-2"

    args = process_image.build_parser().parse_args(["--name", "Joe's Coffee", "--place-id", "pid-9"])
    with pytest.raises(ValueError):
        process_image.run_job(args, SETTINGS)


def test_main_prints_result(monkeypatch, capsys, lookups):
    monkeypatch.setattr(process_image, "get_settings", lambda: SETTINGS)

    assert process_image.main(["--name", "Blue Bottle"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["businessData"]["name"] == "Joe's Coffee"


def test_main_reports_not_found(monkeypatch, capsys, lookups):
    monkeypatch.setattr(process_image, "get_settings", lambda: SETTINGS)
    lookups["state"]["lookup"] = PlacesLookup(status=NOT_FOUND, query="q")

    assert process_image.main(["--name", "Blue Bottle"]) == 1
    assert json.loads(capsys.readouterr().out)["success"] is False
