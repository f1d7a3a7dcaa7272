from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Optional

from models.records import StoredReading
from services.errors import MalformedJsonError, NoContentError, ValidationError
from services.normalizer import validate_candidate
from settings import get_settings

logger = logging.getLogger(__name__)


class ReadingFile:
    """Flat JSON file holding the most recent captured reading."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = Lock()

    def write(self, stored: StoredReading) -> None:
        """Overwrite the file with a pretty-printed payload."""
        text = json.dumps(stored.to_payload(), indent=2, ensure_ascii=False) + "\n"
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        logger.info("Wrote reading file", extra={"path": str(self.path)})

    def load(self) -> StoredReading:
        with self._lock:
            if not self.path.exists():
                raise NoContentError(f"Reading file {str(self.path)!r} does not exist.")
            raw = self.path.read_bytes()

        try:
            data = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            raise MalformedJsonError(
                f"Reading file {str(self.path)!r} is not valid JSON."
            ) from exc

        reading = validate_candidate(data)
        updated_at = data.get("updated_at")
        if not isinstance(updated_at, str) or not updated_at.strip():
            raise ValidationError(["updated_at"])
        return StoredReading(reading=reading, updated_at=updated_at)


@lru_cache
def build_default_file(path: Optional[str] = None) -> ReadingFile:
    settings = get_settings()
    file_path = settings.data_path if path is None else path
    return ReadingFile(path=Path(file_path))
