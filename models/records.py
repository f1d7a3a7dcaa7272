"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class Reading:
    """A validated CO₂ concentration with its measurement time and citation."""

    concentration: float
    timestamp: str
    source: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "ppm": self.concentration,
            "timestamp": self.timestamp,
            "source": self.source,
        }


@dataclass(frozen=True, slots=True)
class StoredReading:
    """A reading stamped with the wall-clock time it was captured."""

    reading: Reading
    updated_at: str

    def to_payload(self) -> Dict[str, Any]:
        payload = self.reading.to_payload()
        payload["updated_at"] = self.updated_at
        return payload
