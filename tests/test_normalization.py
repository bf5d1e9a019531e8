"""Tests for generation record normalization."""

import json
import logging
from datetime import UTC, datetime

import pytest

from headshot_studio.services.normalization import (
    encode_url_list,
    normalize_generation,
    normalize_url_list,
    pick_field,
)


def test_native_list_is_returned_in_order() -> None:
    urls = ["https://x/1.png", "https://x/2.png"]

    assert normalize_url_list(urls) == urls


def test_json_array_string_is_parsed() -> None:
    assert normalize_url_list('["a", "b"]') == ["a", "b"]


def test_encoded_urls_normalize_back_in_order() -> None:
    urls = [f"https://cdn.example.com/headshots/u/{i}.png" for i in (3, 1, 2)]

    assert normalize_url_list(encode_url_list(urls)) == urls


def test_comma_separated_string_is_split_and_trimmed() -> None:
    raw = "https://x/1.png, https://x/2.png ,, "

    assert normalize_url_list(raw) == ["https://x/1.png", "https://x/2.png"]


def test_single_bare_url_becomes_one_item() -> None:
    assert normalize_url_list("https://x/only.png") == ["https://x/only.png"]


@pytest.mark.parametrize(
    "raw",
    [None, "", "null", "42", '{"url": "a"}', "[not json", 17, {"a": 1}, b"bytes"],
)
def test_normalizer_is_total(raw: object) -> None:
    result = normalize_url_list(raw)

    assert isinstance(result, list)
    assert all(isinstance(url, str) and url for url in result)


def test_malformed_json_falls_back_to_delimited_parts() -> None:
    assert normalize_url_list("[not json") == ["[not json"]


def test_non_string_entries_are_dropped_and_logged(caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("headshot_studio"), "propagate", True)
    caplog.set_level(logging.WARNING)

    result = normalize_url_list(json.dumps(["a", None, "", 3, "b"]))

    assert result == ["a", "b"]
    assert "dropped 3 invalid" in caplog.text


def test_pick_field_prefers_snake_case() -> None:
    row = {"generated_images": '["snake"]', "generatedImages": ["camel"]}

    assert pick_field(row, "generated_images", "generatedImages") == '["snake"]'


def test_pick_field_falls_back_to_camel_case() -> None:
    row = {"generated_images": None, "generatedImages": ["camel"]}

    assert pick_field(row, "generated_images", "generatedImages") == ["camel"]


def test_normalize_generation_uses_snake_case_json_string() -> None:
    row = {
        "id": "gen-1",
        "user_id": "user-1",
        "style": "business",
        "background": "studio",
        "generated_images": '["a","b"]',
        "referenceImages": "https://r/1.jpg,https://r/2.jpg",
        "created_at": "2026-10-18T12:30:00Z",
    }

    generation = normalize_generation(row)

    assert generation.generated_images == ["a", "b"]
    assert generation.reference_images == ["https://r/1.jpg", "https://r/2.jpg"]
    assert generation.created_at == datetime(2026, 10, 18, 12, 30, tzinfo=UTC)


def test_normalize_generation_prefers_snake_over_camel() -> None:
    row = {
        "id": "gen-2",
        "userId": "user-2",
        "style": "casual",
        "background": "office",
        "generated_images": ["snake.png"],
        "generatedImages": ["camel.png"],
    }

    generation = normalize_generation(row)

    assert generation.generated_images == ["snake.png"]
    assert generation.user_id == "user-2"


def test_normalize_generation_tolerates_missing_fields() -> None:
    generation = normalize_generation({"id": "gen-3", "created_at": "yesterday"})

    assert generation.generated_images == []
    assert generation.reference_images == []
    assert generation.created_at is None


def test_empty_snake_case_string_falls_back_to_camel_case() -> None:
    row = {"id": "gen-4", "generated_images": "", "generatedImages": '["a","b"]'}

    assert normalize_generation(row).generated_images == ["a", "b"]


def test_null_id_normalizes_to_empty_string() -> None:
    assert normalize_generation({"id": None}).id == ""
