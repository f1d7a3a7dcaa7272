"""Shared fetch-and-normalize entry point used by the web app and the CLI."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from models.records import Reading
from services.fetcher import ReadingFetcher
from services.normalizer import ReadingNormalizer
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ReadingService:
    """Couples one fetcher with the normalizer; one call, one fresh reading."""

    def __init__(
        self,
        fetcher: ReadingFetcher,
        normalizer: Optional[ReadingNormalizer] = None,
    ) -> None:
        self.fetcher = fetcher
        self.normalizer = normalizer or ReadingNormalizer()

    def fetch_current_reading(self) -> Reading:
        body = self.fetcher.fetch()
        reading = self.normalizer.normalize(body)
        logger.info(
            "Fetched CO2 reading",
            extra={
                "ppm": reading.concentration,
                "timestamp": reading.timestamp,
                "source": reading.source,
            },
        )
        return reading

    def close(self) -> None:
        self.fetcher.close()


def build_service(settings: Settings) -> ReadingService:
    fetcher = ReadingFetcher(
        api_key=settings.openai_api_key,
        endpoint=settings.responses_url,
        model=settings.model,
    )
    return ReadingService(fetcher=fetcher)


@lru_cache
def build_default_service() -> ReadingService:
    """Factory that wires the service from environment settings."""
    return build_service(get_settings())
