from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import echo_error, render_reading
from logging_config import configure_logging
from services.errors import ReadingError
from services.readings import ReadingService, build_service
from services.updater import BatchUpdater
from storage.reading_file import ReadingFile


@dataclass
class CLIState:
    config: CLIConfig
    service: ReadingService


app = typer.Typer(
    help="Fetch the latest global CO₂ concentration and keep the data file current.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)
    config = load_config()
    service = build_service(config.settings)
    ctx.obj = CLIState(config=config, service=service)
    ctx.call_on_close(service.close)


@app.command("update")
def update_command(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        help="Reading file to overwrite (defaults to CO2_DATA_PATH or data/latest_co2.json).",
    ),
) -> None:
    """Fetch one reading and write it, stamped with the capture time, to the data file."""
    state = _get_state(ctx)
    path = output if output is not None else state.config.output_path
    updater = BatchUpdater(service=state.service, store=ReadingFile(path))
    try:
        stored = updater.run()
    except (ReadingError, OSError) as exc:
        echo_error(str(exc))
        raise typer.Exit(code=1) from exc

    reading = stored.reading
    typer.echo(f"Updated CO₂ data: {reading.concentration} ppm at {reading.timestamp}")


@app.command("show")
def show_command(
    ctx: typer.Context,
    from_file: bool = typer.Option(
        False,
        "--from-file/--live",
        help="Read the stored data file instead of querying the API.",
    ),
) -> None:
    """Display the current reading."""
    state = _get_state(ctx)
    try:
        if from_file:
            stored = ReadingFile(state.config.output_path).load()
            render_reading(stored.reading, updated_at=stored.updated_at)
        else:
            render_reading(state.service.fetch_current_reading())
    except (ReadingError, OSError) as exc:
        echo_error(str(exc))
        raise typer.Exit(code=1) from exc
