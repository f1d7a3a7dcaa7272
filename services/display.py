"""Transient display state for the interactive reading view."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from functools import lru_cache
from threading import Lock
from typing import Callable, Optional, Union

from models.records import Reading, StoredReading
from services.errors import ReadingError
from services.readings import build_default_service
from settings import get_settings
from storage.reading_file import build_default_file

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error fetching CO2 levels."

ReadingSource = Callable[[], Union[Reading, StoredReading]]


class DisplayStatus(str, Enum):
    loading = "loading"
    error = "error"
    success = "success"


@dataclass(frozen=True)
class DisplaySnapshot:
    status: DisplayStatus
    reading: Optional[Reading] = None
    message: Optional[str] = None
    refreshing: bool = False
    updated_at: Optional[str] = None


def format_ppm(ppm: float) -> str:
    return f"{ppm:.2f} ppm"


def format_timestamp(value: str) -> str:
    """Render an ISO-8601 value in the locale's date-time format.

    Values that do not parse are returned unchanged.
    """
    candidate = value.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return value
    try:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone()
        return parsed.strftime("%c")
    except (ValueError, OverflowError):
        return value


class ReadingDisplay:
    """Holds loading/error/success state and gates concurrent refreshes.

    While a refresh is running, further :meth:`refresh` calls return the
    current snapshot flagged as ``refreshing`` instead of starting a fetch.
    """

    def __init__(self, source: ReadingSource) -> None:
        self._source = source
        self._snapshot = DisplaySnapshot(status=DisplayStatus.loading)
        self._attempted = False
        self._state_lock = Lock()
        self._refresh_lock = Lock()

    @property
    def attempted(self) -> bool:
        return self._attempted

    def snapshot(self) -> DisplaySnapshot:
        with self._state_lock:
            snapshot = self._snapshot
        if self._refresh_lock.locked():
            return replace(snapshot, refreshing=True)
        return snapshot

    def ensure_loaded(self) -> DisplaySnapshot:
        if not self._attempted:
            return self.refresh()
        return self.snapshot()

    def refresh(self) -> DisplaySnapshot:
        if not self._refresh_lock.acquire(blocking=False):
            return self.snapshot()
        try:
            with self._state_lock:
                self._attempted = True
                self._snapshot = replace(
                    self._snapshot,
                    status=DisplayStatus.loading,
                    message=None,
                )
                previous = self._snapshot
            outcome = self._load(previous)
            with self._state_lock:
                self._snapshot = outcome
                return outcome
        finally:
            self._refresh_lock.release()

    def _load(self, previous: DisplaySnapshot) -> DisplaySnapshot:
        try:
            result = self._source()
        except ReadingError as exc:
            logger.warning("Reading refresh failed", extra={"reason": str(exc)})
            return replace(previous, status=DisplayStatus.error, message=str(exc))
        except Exception:
            logger.exception("Unexpected failure while refreshing reading")
            return replace(previous, status=DisplayStatus.error, message=UNKNOWN_ERROR_MESSAGE)

        if isinstance(result, StoredReading):
            return DisplaySnapshot(
                status=DisplayStatus.success,
                reading=result.reading,
                updated_at=result.updated_at,
            )
        return DisplaySnapshot(status=DisplayStatus.success, reading=result)


@lru_cache
def build_default_display() -> ReadingDisplay:
    """Wire the display to the live service or to the reading file."""
    settings = get_settings()
    if settings.display_source == "file":
        return ReadingDisplay(build_default_file().load)
    return ReadingDisplay(build_default_service().fetch_current_reading)
