from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app
from models.records import AirReading
from services.fetcher import FetchError
from settings import get_settings

GOOD_URL = "http://192.168.1.20/air-data/latest"
BAD_URL = "http://192.168.1.21/air-data/latest"


class StubFetcher:
    def __init__(self) -> None:
        self.calls: List[str] = []
        self.closed = False

    async def fetch(self, source: str) -> AirReading:
        self.calls.append(source)
        if source == BAD_URL:
            raise FetchError(source, "connection refused")
        return AirReading(
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
            score=80,
            temp=21.5,
            humid=40.0,
            co2=650,
            voc=120,
            pm25=5,
        )

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> None:
    for name in ("AWAIR_AIRDATA_URLS", "AWAIR_EXPORTER_ADDRESS", "AWAIR_EXPORTER_PORT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _install_stub(monkeypatch, stub: StubFetcher) -> None:
    monkeypatch.setattr("cli.app.ReadingFetcher", lambda: stub)


def _install_server(monkeypatch) -> Dict[str, Any]:
    captured: Dict[str, Any] = {}

    def fake_run(exporter_app, **kwargs) -> None:
        captured["app"] = exporter_app
        captured.update(kwargs)

    monkeypatch.setattr("cli.app.uvicorn.run", fake_run)
    monkeypatch.setattr("cli.app.configure_logging", lambda level=None: None)
    return captured


def test_serve_requires_a_source(monkeypatch, runner: CliRunner) -> None:
    captured = _install_server(monkeypatch)

    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 2
    assert "At least one air-data URL" in result.output
    assert captured == {}


def test_serve_rejects_invalid_address(monkeypatch, runner: CliRunner) -> None:
    captured = _install_server(monkeypatch)

    result = runner.invoke(app, ["serve", "-u", GOOD_URL, "--address", "not-an-ip"])

    assert result.exit_code == 2
    assert "Invalid listen address" in result.output
    assert captured == {}


def test_serve_rejects_unparseable_source_url(monkeypatch, runner: CliRunner) -> None:
    captured = _install_server(monkeypatch)

    result = runner.invoke(app, ["serve", "-u", GOOD_URL, "-u", "http://[::1/air-data/latest"])

    assert result.exit_code == 2
    assert "Invalid air-data URL" in result.output
    assert captured == {}


def test_serve_starts_server_with_options(monkeypatch, runner: CliRunner) -> None:
    captured = _install_server(monkeypatch)

    result = runner.invoke(
        app,
        ["serve", "-u", GOOD_URL, "-u", BAD_URL, "-a", "127.0.0.1", "-p", "9101", "--interval", "5"],
    )

    assert result.exit_code == 0, result.output
    assert captured["host"] == "127.0.0.1"
    assert captured["port"] == 9101
    assert captured["log_config"] is None
    settings = captured["app"].state.settings
    assert settings.airdata_urls == (GOOD_URL, BAD_URL)
    assert settings.refresh_interval == 5.0


def test_serve_reads_sources_from_environment(monkeypatch, runner: CliRunner) -> None:
    captured = _install_server(monkeypatch)
    monkeypatch.setenv("AWAIR_AIRDATA_URLS", f"{GOOD_URL}, {BAD_URL}")

    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 0, result.output
    assert captured["port"] == 8000
    assert captured["host"] == "0.0.0.0"
    assert captured["app"].state.settings.airdata_urls == (GOOD_URL, BAD_URL)


def test_check_prints_readings(monkeypatch, runner: CliRunner) -> None:
    stub = StubFetcher()
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["check", "-u", GOOD_URL])

    assert result.exit_code == 0, result.output
    assert GOOD_URL in result.stdout
    assert "score: 80.0" in result.stdout
    assert "humidity: 40.0" in result.stdout
    assert stub.calls == [GOOD_URL]
    assert stub.closed is True


def test_check_reports_failures(monkeypatch, runner: CliRunner) -> None:
    stub = StubFetcher()
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["check", "-u", GOOD_URL, "-u", BAD_URL])

    assert result.exit_code == 1
    assert "error: connection refused" in result.stdout
    assert stub.calls == [GOOD_URL, BAD_URL]
    assert stub.closed is True
