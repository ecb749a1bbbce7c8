import base64

import pytest

from listing.models import NoTextDetected
from listing.vendors import google_vision


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append((url, params, json, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_vision, "_SESSION", session)
    return session


def test_detect_text_maps_annotations(patch_session):
    patch_session.response = DummyResponse(
        payload={
            "responses": [
                {
                    "textAnnotations": [
                        {"description": "BLUE BOTTLE\nCOFFEE", "boundingPoly": {"vertices": [{"x": 1}]}},
                        {"description": "BLUE", "confidence": 0.97, "boundingPoly": {"vertices": [{"x": 1}]}},
                        {"description": "BOTTLE"},
                    ]
                }
            ]
        }
    )

    detections = google_vision.detect_text(b"image-bytes", "key")

    assert [d.text for d in detections] == ["BLUE BOTTLE\nCOFFEE", "BLUE", "BOTTLE"]
    assert detections[1].confidence == 0.97
    assert detections[1].has_bounding_box is True
    assert detections[2].confidence == 0.0
    assert detections[2].has_bounding_box is False

    url, params, body, timeout = patch_session.calls[0]
    assert url.endswith("images:annotate")
    assert params == {"key": "key"}
    request = body["requests"][0]
    assert base64.b64decode(request["image"]["content"]) == b"image-bytes"
    assert request["features"] == [{"type": "TEXT_DETECTION"}]


def test_detect_text_without_annotations(patch_session):
    patch_session.response = DummyResponse(payload={"responses": [{}]})
    with pytest.raises(google_vision.OcrNoTextDetected):
        google_vision.detect_text(b"blank", "key")


def test_detect_text_error_object(patch_session):
    patch_session.response = DummyResponse(
        payload={"responses": [{"error": {"code": 3, "message": "Bad image data."}}]}
    )
    with pytest.raises(google_vision.GoogleVisionError, match="Bad image data"):
        google_vision.detect_text(b"junk", "key")


def test_detect_text_requires_key_and_content():
    with pytest.raises(RuntimeError):
        google_vision.detect_text(b"image", "")
    with pytest.raises(ValueError):
        google_vision.detect_text(b"", "key")


def test_no_annotations_error_is_the_shared_no_text_error():
    assert issubclass(google_vision.OcrNoTextDetected, NoTextDetected)
    assert issubclass(google_vision.OcrNoTextDetected, google_vision.GoogleVisionError)
    assert str(google_vision.OcrNoTextDetected()) == "No text detected in image"
