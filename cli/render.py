from __future__ import annotations

from typing import Any, Iterable, Optional

import typer

from models.records import Reading
from services.display import format_ppm, format_timestamp


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def echo_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)


def render_reading(reading: Reading, updated_at: Optional[str] = None) -> None:
    echo_heading("Today's Global CO₂ Concentration")
    pairs = [
        ("concentration", format_ppm(reading.concentration)),
        ("measured", format_timestamp(reading.timestamp)),
        ("source", reading.source),
    ]
    if updated_at:
        pairs.append(("updated_at", updated_at))
    echo_key_values(pairs)
