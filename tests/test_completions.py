"""Tests for model output parsing helpers."""

import pytest

from wellness_tracker.services.completions import (
    AnalysisError,
    detect_mime_type,
    extension_for,
    parse_json_response,
    to_data_url,
)


def test_parse_json_response_plain_object() -> None:
    assert parse_json_response('{"calories": 400}') == {"calories": 400}


def test_parse_json_response_strips_markdown_fence() -> None:
    text = 'Here you go:\n```json\n{"dishName": "Salad"}\n```'

    assert parse_json_response(text) == {"dishName": "Salad"}


def test_parse_json_response_extracts_object_from_prose() -> None:
    text = 'The estimate is {"calories": 250, "protein": 12} for this meal.'

    assert parse_json_response(text)["protein"] == 12


def test_parse_json_response_repairs_quotes_and_bare_keys() -> None:
    assert parse_json_response("{calories: 100, name: 'Soup'}") == {
        "calories": 100,
        "name": "Soup",
    }


@pytest.mark.parametrize("text", ["", "   ", "no json here", "[1, 2]", "{broken"])
def test_parse_json_response_rejects_unusable_text(text: str) -> None:
    with pytest.raises(AnalysisError):
        parse_json_response(text)


def test_detect_mime_type_from_signatures() -> None:
    assert detect_mime_type(b"\xff\xd8\xff\xe0rest") == "image/jpeg"
    assert detect_mime_type(b"\x89PNG\r\n\x1a\nrest") == "image/png"
    assert detect_mime_type(b"RIFF\x00\x00\x00\x00WEBPrest") == "image/webp"
    assert detect_mime_type(b"unknown") == "image/jpeg"


def test_extension_for_maps_jpeg_to_jpg() -> None:
    assert extension_for(b"\xff\xd8\xff\xe0") == "jpg"
    assert extension_for(b"\x89PNG\r\n\x1a\n") == "png"


def test_to_data_url_encodes_bytes() -> None:
    assert to_data_url(b"\x89PNG\r\n\x1a\n") == "data:image/png;base64,iVBORw0KGgo="
