from __future__ import annotations

from typing import Any, Iterable, Sequence

import typer

from models.records import AIR_QUALITY_GAUGES, AirReading, GaugeDefinition


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_reading(
    source: str,
    reading: AirReading,
    gauges: Sequence[GaugeDefinition] = AIR_QUALITY_GAUGES,
) -> None:
    echo_heading(source)
    pairs: list[tuple[str, Any]] = [("timestamp", reading.timestamp.isoformat())]
    pairs.extend(reading.gauge_values(gauges).items())
    echo_key_values(pairs)


def render_failure(source: str, reason: str) -> None:
    echo_heading(source)
    typer.secho(f"error: {reason}", fg=typer.colors.RED)
