from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

import httpx


_ADDRESS_ENV = "AWAIR_EXPORTER_ADDRESS"
_PORT_ENV = "AWAIR_EXPORTER_PORT"
_AIRDATA_URLS_ENV = "AWAIR_AIRDATA_URLS"
_INTERVAL_ENV = "AWAIR_REFRESH_INTERVAL"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_REFRESH_INTERVAL = 30.0


class ConfigurationError(ValueError):
    """Raised when the exporter cannot start with the given configuration."""


@dataclass(frozen=True)
class Settings:
    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    airdata_urls: Tuple[str, ...] = ()
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    log_level: str = "INFO"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return int(candidate)
    except ValueError as exc:
        raise ConfigurationError(f"{_PORT_ENV} is not a valid port: {candidate!r}") from exc


def _read_interval(default: float) -> float:
    value = os.getenv(_INTERVAL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return float(candidate)
    except ValueError as exc:
        raise ConfigurationError(
            f"{_INTERVAL_ENV} is not a number of seconds: {candidate!r}"
        ) from exc


def _read_urls() -> Tuple[str, ...]:
    value = os.getenv(_AIRDATA_URLS_ENV)
    if value is None:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


def validate_settings(settings: Settings) -> Settings:
    """Reject configurations the exporter cannot run with."""
    if not settings.airdata_urls:
        raise ConfigurationError("At least one air-data URL must be configured.")

    for url in settings.airdata_urls:
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, ValueError) as exc:
            raise ConfigurationError(f"Invalid air-data URL: {url!r} ({exc})") from exc
        if parsed.scheme not in {"http", "https"} or not parsed.host:
            raise ConfigurationError(f"Invalid air-data URL: {url!r}")

    try:
        ipaddress.ip_address(settings.address)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid listen address: {settings.address!r}") from exc

    if not 0 <= settings.port <= 65535:
        raise ConfigurationError(f"Invalid listen port: {settings.port}")

    if settings.refresh_interval <= 0:
        raise ConfigurationError(
            f"Refresh interval must be positive, got {settings.refresh_interval}"
        )
    return settings


@lru_cache
def get_settings() -> Settings:
    return Settings(
        address=_read_str_env(_ADDRESS_ENV, DEFAULT_ADDRESS),
        port=_read_port(DEFAULT_PORT),
        airdata_urls=_read_urls(),
        refresh_interval=_read_interval(DEFAULT_REFRESH_INTERVAL),
        log_level=_read_log_level("INFO"),
    )
