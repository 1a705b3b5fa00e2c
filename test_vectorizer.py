#!/usr/bin/env python3
"""Test the vectorization client, collaborator models and backdrop resolution."""

import requests

from printplace.api.catalog import SHIRT_BACK_SVG, SHIRT_FRONT_SVG, backdrop_url, load_backdrop
from printplace.api.models import ArtworkRecord, ArtworkSource, Garment
from printplace.api.vectorizer import VectorizerClient
from printplace.config import VectorizerConfig


class FakeResponse:
    def __init__(self, payload=None, status=200, content=b""):
        self.payload = payload
        self.status_code = status
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def client(session: FakeSession, api_key: str | None = "key") -> VectorizerClient:
    return VectorizerClient(VectorizerConfig(url="https://shop.example.com/", api_key=api_key), session=session)


def test_vectorize_success():
    session = FakeSession(FakeResponse({"success": True, "vectorized_file_url": "https://cdn/x.svg", "status": "completed"}))

    result = client(session).vectorize("abc")

    assert result.completed
    assert result.vectorized_url == "https://cdn/x.svg"
    url, kwargs = session.calls[0]
    assert url == "https://shop.example.com/api/artwork/vectorize"
    assert kwargs["json"] == {"artwork_file_id": "abc"}
    assert kwargs["headers"]["authorization"] == "Bearer key"


def test_vectorize_without_api_key():
    session = FakeSession(FakeResponse({"vectorized_file_url": "https://cdn/x.svg"}))
    result = client(session, api_key=None).vectorize("abc")
    assert result.status == "completed"
    assert "authorization" not in session.calls[0][1]["headers"]


def test_vectorize_http_error_is_failed_result():
    result = client(FakeSession(FakeResponse({}, status=500))).vectorize("abc")
    assert result.status == "failed"
    assert not result.completed


def test_vectorize_connection_error_is_failed_result():
    result = client(FakeSession(error=requests.ConnectionError("down"))).vectorize("abc")
    assert result.status == "failed"
    assert "down" in result.error


def test_vectorize_non_json_response():
    result = client(FakeSession(FakeResponse(None))).vectorize("abc")
    assert result.status == "failed"


def test_vectorize_unknown_status():
    result = client(FakeSession(FakeResponse({"status": "exploded"}))).vectorize("abc")
    assert result.status == "failed"


def test_fetch_bytes():
    session = FakeSession(FakeResponse(content=b"data"))
    assert client(session).fetch_bytes("https://cdn/file.png") == b"data"


def test_artwork_record_from_dict():
    record = ArtworkRecord.from_dict(
        {
            "id": 12,
            "file_url": "https://cdn/logo.svg",
            "file_name": "logo.svg",
            "file_size": 1310720,
            "vectorization_status": "completed",
            "vectorized_file_url": "https://cdn/logo-vec.svg",
        }
    )
    assert record.id == "12"
    assert record.transform is None
    assert record.format_file_size() == "1.25 MB"

    source = ArtworkSource.from_record(record)
    assert source.is_vector
    assert source.needs_fetch
    assert source.vectorized_url == "https://cdn/logo-vec.svg"


def test_backdrop_url_fallbacks():
    garment = Garment(
        id="g1",
        name="Tee",
        available_colors=["black", "white"],
        color_images={"black": "black-front.png", "white": "white-front.png"},
        color_back_images={"black": "black-back.png"},
    )
    assert backdrop_url("front") == SHIRT_FRONT_SVG
    assert backdrop_url("full_back") == SHIRT_BACK_SVG
    assert backdrop_url("left_chest", garment, "black") == "black-front.png"
    assert backdrop_url("back", garment, "black") == "black-back.png"
    assert backdrop_url("back", garment, "white") == "white-front.png"
    assert backdrop_url("back", garment, "red") == SHIRT_BACK_SVG


def test_load_backdrop_missing_file_returns_none(tmp_path):
    assert load_backdrop(str(tmp_path / "nope.png")) is None


def test_load_backdrop_local_file(tmp_path):
    from PIL import Image

    path = tmp_path / "shirt.png"
    Image.new("RGB", (20, 30), (10, 10, 10)).save(path)
    backdrop = load_backdrop(str(path))
    assert backdrop.size == (20, 30)
    assert backdrop.mode == "RGBA"
