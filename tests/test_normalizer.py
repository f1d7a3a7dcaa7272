"""Unit tests for extracting readings from responses payloads."""

from __future__ import annotations

import json
import math

import pytest

from models.records import Reading
from services.errors import MalformedJsonError, NoContentError, ValidationError
from services.normalizer import (
    FreeText,
    Other,
    ReadingNormalizer,
    StructuredJson,
    classify_content,
    validate_candidate,
)

VALID = {
    "ppm": 421.3,
    "source": "https://example.org/co2",
    "timestamp": "2024-05-01T00:00:00Z",
}


def _response(*content: object, **extra: object) -> dict:
    body: dict = {"output": [{"type": "message", "content": list(content)}]}
    body.update(extra)
    return body


@pytest.fixture()
def normalizer() -> ReadingNormalizer:
    return ReadingNormalizer()


def test_structured_content_is_used_untouched(normalizer: ReadingNormalizer) -> None:
    body = _response({"type": "json_schema", "name": "co2_reading", "json": dict(VALID)})

    reading = normalizer.normalize(body)

    assert reading == Reading(
        concentration=421.3,
        source="https://example.org/co2",
        timestamp="2024-05-01T00:00:00Z",
    )


def test_structured_content_wins_over_text(normalizer: ReadingNormalizer) -> None:
    text = json.dumps({**VALID, "ppm": 999.0})
    body = _response(
        {"type": "output_text", "text": text},
        {"type": "json", "json": dict(VALID)},
    )

    assert normalizer.normalize(body).concentration == 421.3


def test_free_text_json_is_parsed(normalizer: ReadingNormalizer) -> None:
    body = _response({"type": "output_text", "text": json.dumps(VALID)})

    reading = normalizer.normalize(body)

    assert reading.concentration == 421.3
    assert reading.source == "https://example.org/co2"
    assert reading.timestamp == "2024-05-01T00:00:00Z"


def test_structured_item_without_object_falls_back_to_text(normalizer: ReadingNormalizer) -> None:
    body = _response(
        {"type": "json_schema", "json": None},
        {"type": "output_text", "text": json.dumps(VALID)},
    )

    assert normalizer.normalize(body).concentration == 421.3


def test_output_text_string_is_used_when_no_content_items(normalizer: ReadingNormalizer) -> None:
    body = {"output": [], "output_text": json.dumps(VALID)}

    assert normalizer.normalize(body).source == "https://example.org/co2"


def test_output_text_list_uses_first_element(normalizer: ReadingNormalizer) -> None:
    first = json.dumps(VALID)
    second = json.dumps({**VALID, "ppm": 1.0})
    body = {"output_text": [first, second]}

    assert normalizer.normalize(body).concentration == 421.3


def test_no_content_anywhere_raises(normalizer: ReadingNormalizer) -> None:
    body = _response({"type": "reasoning", "summary": []})

    with pytest.raises(NoContentError):
        normalizer.normalize(body)


def test_empty_output_text_list_raises_no_content(normalizer: ReadingNormalizer) -> None:
    with pytest.raises(NoContentError):
        normalizer.normalize({"output": "not-a-list", "output_text": []})


def test_non_object_body_raises_no_content(normalizer: ReadingNormalizer) -> None:
    with pytest.raises(NoContentError):
        normalizer.normalize(["unexpected"])


def test_invalid_json_text_raises_malformed(normalizer: ReadingNormalizer) -> None:
    body = _response({"type": "output_text", "text": "The CO2 level is about 421 ppm."})

    with pytest.raises(MalformedJsonError):
        normalizer.normalize(body)


def test_missing_source_names_field(normalizer: ReadingNormalizer) -> None:
    payload = {key: value for key, value in VALID.items() if key != "source"}
    body = _response({"type": "output_text", "text": json.dumps(payload)})

    with pytest.raises(ValidationError) as excinfo:
        normalizer.normalize(body)

    assert excinfo.value.missing_fields == ("source",)
    assert "source" in str(excinfo.value)


def test_json_array_text_fails_validation_on_every_field(normalizer: ReadingNormalizer) -> None:
    body = _response({"type": "output_text", "text": "[1, 2, 3]"})

    with pytest.raises(ValidationError) as excinfo:
        normalizer.normalize(body)

    assert excinfo.value.missing_fields == ("ppm", "source", "timestamp")


@pytest.mark.parametrize(
    ("ppm", "expected"),
    [(421, 421.0), ("421.5", 421.5), (" 420.25 ", 420.25)],
)
def test_ppm_coerces_numbers_and_numeric_strings(ppm: object, expected: float) -> None:
    reading = validate_candidate({**VALID, "ppm": ppm})

    assert reading.concentration == expected


@pytest.mark.parametrize("ppm", [None, True, "abc", math.inf, math.nan, -5, 0, [421], 10**400])
def test_invalid_ppm_is_rejected(ppm: object) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_candidate({**VALID, "ppm": ppm})

    assert excinfo.value.missing_fields == ("ppm",)


def test_blank_strings_are_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_candidate({"ppm": 421.0, "source": "", "timestamp": "   "})

    assert excinfo.value.missing_fields == ("source", "timestamp")


def test_classify_content_variants() -> None:
    assert classify_content({"type": "json", "json": {"a": 1}}) == StructuredJson({"a": 1})
    assert classify_content({"type": "output_text", "text": "hi"}) == FreeText("hi")
    assert classify_content({"type": "output_text", "text": 5}) == Other(
        {"type": "output_text", "text": 5}
    )
    assert classify_content("stray") == Other("stray")


def test_oversized_integer_text_fails_validation(normalizer: ReadingNormalizer) -> None:
    text = '{"ppm": ' + "9" * 400 + ', "source": "https://x", "timestamp": "2024-05-01T00:00:00Z"}'

    with pytest.raises(ValidationError) as excinfo:
        normalizer.normalize({"output_text": text})

    assert excinfo.value.missing_fields == ("ppm",)
