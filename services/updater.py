"""One-shot capture of the current reading into the reading file."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from models.records import StoredReading
from services.readings import ReadingService
from storage.reading_file import ReadingFile

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_capture_time(moment: datetime) -> str:
    """Render ``moment`` as UTC ISO-8601 with millisecond precision and a ``Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BatchUpdater:
    def __init__(
        self,
        service: ReadingService,
        store: ReadingFile,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.service = service
        self.store = store
        self.clock = clock or utc_now

    def run(self) -> StoredReading:
        reading = self.service.fetch_current_reading()
        stored = StoredReading(
            reading=reading,
            updated_at=format_capture_time(self.clock()),
        )
        self.store.write(stored)
        logger.info(
            "Updated reading file",
            extra={
                "ppm": reading.concentration,
                "timestamp": reading.timestamp,
                "updated_at": stored.updated_at,
                "path": str(self.store.path),
            },
        )
        return stored
