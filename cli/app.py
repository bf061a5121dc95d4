from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple, Union

import typer
import uvicorn

from app.main import create_app
from cli.config import load_config
from cli.render import render_failure, render_reading
from logging_config import configure_logging
from models.records import AirReading
from services.fetcher import FetchError, ReadingFetcher
from settings import ConfigurationError, Settings

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Export sensor data from the Awair Local API to Prometheus.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_URLS_HELP = "Air-data URL exposed by the Awair Local API (repeatable; defaults to AWAIR_AIRDATA_URLS)."


def _load_or_exit(
    address: Optional[str] = None,
    port: Optional[int] = None,
    airdata_urls: Optional[Sequence[str]] = None,
    interval: Optional[float] = None,
    log_level: Optional[str] = None,
) -> Settings:
    try:
        return load_config(
            address=address,
            port=port,
            airdata_urls=airdata_urls,
            interval=interval,
            log_level=log_level,
        )
    except ConfigurationError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc


@app.callback()
def main() -> None:
    """Awair Local API Prometheus exporter."""


@app.command("serve")
def serve_command(
    address: Optional[str] = typer.Option(
        None, "--address", "-a", help="Metrics server address (default 0.0.0.0)."
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Metrics server port (default 8000)."
    ),
    airdata_urls: Optional[List[str]] = typer.Option(None, "--airdata-url", "-u", help=_URLS_HELP),
    interval: Optional[float] = typer.Option(
        None, "--interval", help="Seconds between refresh cycles (default 30)."
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level."),
) -> None:
    """Poll the configured sensors and serve their readings on /metrics."""
    settings = _load_or_exit(address, port, airdata_urls, interval, log_level)
    configure_logging(settings.log_level)

    exporter_app = create_app(settings)
    logger.info(
        "Serving metrics on http://%s:%s/metrics",
        settings.address,
        settings.port,
        extra={"address": settings.address, "port": settings.port},
    )
    uvicorn.run(
        exporter_app,
        host=settings.address,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )


async def _fetch_all(
    urls: Sequence[str],
) -> List[Tuple[str, Union[AirReading, FetchError]]]:
    fetcher = ReadingFetcher()
    results: List[Tuple[str, Union[AirReading, FetchError]]] = []
    try:
        for url in urls:
            try:
                results.append((url, await fetcher.fetch(url)))
            except FetchError as exc:
                results.append((url, exc))
    finally:
        await fetcher.aclose()
    return results


@app.command("check")
def check_command(
    airdata_urls: Optional[List[str]] = typer.Option(None, "--airdata-url", "-u", help=_URLS_HELP),
) -> None:
    """Fetch every source once and print what the exporter would record."""
    settings = _load_or_exit(airdata_urls=airdata_urls)

    failures = 0
    for index, (url, outcome) in enumerate(asyncio.run(_fetch_all(settings.airdata_urls))):
        if index:
            typer.echo()
        if isinstance(outcome, FetchError):
            failures += 1
            render_failure(url, outcome.reason)
        else:
            render_reading(url, outcome)

    if failures:
        raise typer.Exit(code=1)
