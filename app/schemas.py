"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, Field

from models.records import Reading
from services.display import DisplaySnapshot, DisplayStatus, format_ppm, format_timestamp


def _is_web_url(value: str) -> bool:
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


class ReadingPayload(BaseModel):
    """A reading as exposed over HTTP, with display-ready renderings."""

    ppm: float = Field(..., gt=0, description="Concentration in parts per million.")
    timestamp: str = Field(..., description="ISO-8601 measurement time.")
    source: str = Field(..., min_length=1, description="URL of the cited data source.")
    ppm_display: str
    timestamp_display: str
    source_is_link: bool = Field(
        default=False, description="Whether the source is an http(s) URL safe to link."
    )

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingPayload":
        return cls(
            ppm=reading.concentration,
            timestamp=reading.timestamp,
            source=reading.source,
            ppm_display=format_ppm(reading.concentration),
            timestamp_display=format_timestamp(reading.timestamp),
            source_is_link=_is_web_url(reading.source),
        )


class DisplayStatePayload(BaseModel):
    """Current loading/error/success state of the reading view."""

    status: DisplayStatus
    refreshing: bool = False
    message: Optional[str] = None
    reading: Optional[ReadingPayload] = None
    updated_at: Optional[str] = Field(
        default=None, description="Capture time when the reading came from the data file."
    )

    @classmethod
    def from_snapshot(cls, snapshot: DisplaySnapshot) -> "DisplayStatePayload":
        reading = snapshot.reading
        return cls(
            status=snapshot.status,
            refreshing=snapshot.refreshing,
            message=snapshot.message,
            reading=ReadingPayload.from_reading(reading) if reading else None,
            updated_at=snapshot.updated_at,
        )
