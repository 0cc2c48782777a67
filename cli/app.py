from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import httpx
import typer

from app.main import build_display, create_bridge, run_bridge
from cli.render import render_snapshot
from datastore.sensor_cache import SensorCache
from logging_config import configure_logging
from services.ingester import SensorStreamError
from services.line_buffer import LineBuffer
from services.parser import parse_and_format
from settings import ConfigurationError, get_settings

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Bridge an air quality sensor stream to a rotating text display.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)


@app.command("run")
def run_command() -> None:
    """Stream sensor data and rotate it across the display until the stream fails."""
    try:
        bridge = create_bridge(get_settings())
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        _fail(f"Configuration error: {exc}")

    try:
        run_bridge(bridge)
    except SensorStreamError as exc:
        logger.critical("Sensor stream failed: %s", exc)
        _fail(f"Sensor stream failed: {exc}")
    except KeyboardInterrupt:
        logger.info("Interrupted; exiting")
        raise typer.Exit(code=130)


@app.command("parse")
def parse_command(
    lines: Optional[List[str]] = typer.Argument(None, help="Sensor lines to parse."),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Replay a captured sensor stream from a file.",
    ),
    only_present: bool = typer.Option(
        False,
        "--only-present/--all",
        help="Hide metrics that received no data.",
    ),
) -> None:
    """Parse sample lines offline and print the resulting cache contents."""
    if not lines and file is None:
        raise typer.BadParameter("Provide at least one line or --file.")

    cache = SensorCache()
    collected: List[str] = []
    if file is not None:
        buffer = LineBuffer()
        with file.open("rb") as handle:
            for chunk in iter(lambda: handle.read(4096), b""):
                collected.extend(buffer.feed(chunk))
        collected.extend(buffer.feed(b"\n"))
    collected.extend(lines or [])

    for line in collected:
        values = parse_and_format(line)
        if values:
            cache.update_many(values)

    render_snapshot(cache.snapshot(), include_missing=not only_present)


@app.command("show")
def show_command(
    text: str = typer.Argument(..., help="Text to put on the display."),
    seconds: Optional[int] = typer.Option(
        None,
        "--seconds",
        "-s",
        min=1,
        help="Display duration (defaults to SECONDS_PER_DATA).",
    ),
) -> None:
    """Send a single notification to the display."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        _fail(f"Configuration error: {exc}")

    display = build_display(settings)
    try:
        display.show(text, seconds or settings.seconds_per_data)
    except httpx.HTTPError as exc:
        _fail(f"Display request failed: {exc}")
    finally:
        display.close()
    typer.secho("Notification sent.", fg=typer.colors.GREEN)


@app.command("clear")
def clear_command() -> None:
    """Stop the notification currently on the display."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        _fail(f"Configuration error: {exc}")

    display = build_display(settings)
    try:
        display.clear()
    except httpx.HTTPError as exc:
        _fail(f"Display request failed: {exc}")
    finally:
        display.close()
    typer.secho("Display cleared.", fg=typer.colors.GREEN)
