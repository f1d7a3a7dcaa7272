"""Failure kinds raised while acquiring a CO₂ reading."""

from __future__ import annotations

from typing import Optional, Sequence


class ReadingError(Exception):
    """Base class for every failure of the fetch/normalize pipeline."""


class AuthError(ReadingError):
    """No API credential was configured."""


class RequestError(ReadingError):
    """The responses endpoint could not be reached or returned a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: str = "",
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class NoContentError(ReadingError):
    """The response carried neither structured nor textual content."""


class MalformedJsonError(ReadingError):
    """Textual content was found but it is not valid JSON."""


class ValidationError(ReadingError):
    """The candidate object is missing required fields or has invalid ones."""

    def __init__(self, missing_fields: Sequence[str]) -> None:
        self.missing_fields = tuple(missing_fields)
        super().__init__(
            "Reading JSON is missing required fields: "
            + ", ".join(self.missing_fields)
        )
