"""Turn a loosely-typed responses payload into a validated reading."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from models.records import Reading
from services.errors import MalformedJsonError, NoContentError, ValidationError

logger = logging.getLogger(__name__)

_STRUCTURED_TYPES = frozenset({"json", "json_schema"})


@dataclass(frozen=True)
class StructuredJson:
    """Content item tagged as JSON output; ``payload`` is its embedded value."""

    payload: Any


@dataclass(frozen=True)
class FreeText:
    """Content item holding plain text that may encode a JSON document."""

    text: str


@dataclass(frozen=True)
class Other:
    item: Any


ContentItem = Union[StructuredJson, FreeText, Other]


def classify_content(item: Any) -> ContentItem:
    if not isinstance(item, dict):
        return Other(item)
    if item.get("type") in _STRUCTURED_TYPES:
        return StructuredJson(item.get("json"))
    text = item.get("text")
    if isinstance(text, str):
        return FreeText(text)
    return Other(item)


def iter_content_items(body: Dict[str, Any]) -> Iterator[ContentItem]:
    """Yield classified items from every ``output[*].content[*]`` entry."""
    output = body.get("output")
    if not isinstance(output, list):
        return
    for entry in output:
        content = entry.get("content") if isinstance(entry, dict) else None
        if not isinstance(content, list):
            continue
        for item in content:
            yield classify_content(item)


def _coerce_ppm(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def validate_candidate(candidate: Any) -> Reading:
    """Validate a decoded object and build a :class:`Reading` from it.

    Every failing field is reported at once, in the order ``ppm``, ``source``,
    ``timestamp``.
    """
    data = candidate if isinstance(candidate, dict) else {}
    ppm = _coerce_ppm(data.get("ppm"))
    source = _non_empty_str(data.get("source"))
    timestamp = _non_empty_str(data.get("timestamp"))

    missing: List[str] = []
    if ppm is None:
        missing.append("ppm")
    if source is None:
        missing.append("source")
    if timestamp is None:
        missing.append("timestamp")
    if missing:
        logger.warning("Reading failed validation", extra={"missing_fields": missing})
        raise ValidationError(missing)

    assert ppm is not None and source is not None and timestamp is not None
    return Reading(concentration=ppm, timestamp=timestamp, source=source)


class ReadingNormalizer:
    """Pure extraction component that can be unit tested in isolation."""

    def normalize(self, body: Any) -> Reading:
        if not isinstance(body, dict):
            raise NoContentError("OpenAI did not return any textual content.")

        items = list(iter_content_items(body))

        structured = self._structured_payload(items)
        if structured is not None:
            logger.debug("Using structured content", extra={"tier": "structured"})
            return validate_candidate(structured)

        text = self._text_candidate(items, body.get("output_text"))
        if not text:
            raise NoContentError("OpenAI did not return any textual content.")

        logger.debug("Falling back to text content", extra={"tier": "text"})
        try:
            parsed = json.loads(text)
        except ValueError as exc:
            raise MalformedJsonError("Failed to parse OpenAI response as JSON.") from exc
        return validate_candidate(parsed)

    @staticmethod
    def _structured_payload(items: Iterable[ContentItem]) -> Optional[Dict[str, Any]]:
        for item in items:
            if isinstance(item, StructuredJson):
                # Only the first structured item is considered.
                return item.payload if isinstance(item.payload, dict) else None
        return None

    @staticmethod
    def _text_candidate(items: Iterable[ContentItem], output_text: Any) -> Optional[str]:
        for item in items:
            if isinstance(item, FreeText):
                return item.text
        if isinstance(output_text, list):
            output_text = output_text[0] if output_text else None
        return output_text if isinstance(output_text, str) else None
