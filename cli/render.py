from __future__ import annotations

from typing import Any, Iterable, Mapping

import typer

from models.metrics import SENTINEL, SPEC_BY_METRIC, Metric


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_snapshot(snapshot: Mapping[Metric, str], include_missing: bool = True) -> None:
    echo_heading("Sensor Snapshot")
    pairs = [
        (SPEC_BY_METRIC[metric].label, value)
        for metric, value in snapshot.items()
        if include_missing or value != SENTINEL
    ]
    if pairs:
        echo_key_values(pairs)
    else:
        typer.echo("No data received.")
