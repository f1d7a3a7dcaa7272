from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.fetcher",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Reading failed validation",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extras_in_order() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    rendered = formatter.format(_record(missing_fields=["ppm", "source"], status=502))

    assert rendered == "Reading failed validation | status=502 missing_fields=ppm,source"


def test_formatter_skips_none_and_unknown_extras() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["ppm"])

    assert formatter.format(_record(ppm=None, other="x")) == "Reading failed validation"
