from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from settings import Settings, get_settings, validate_settings


def load_config(
    address: Optional[str] = None,
    port: Optional[int] = None,
    airdata_urls: Optional[Sequence[str]] = None,
    interval: Optional[float] = None,
    log_level: Optional[str] = None,
) -> Settings:
    """Overlay command-line values on the environment settings and validate them."""
    base = get_settings()
    overrides = {}
    if address:
        overrides["address"] = address.strip()
    if port is not None:
        overrides["port"] = port
    if airdata_urls:
        overrides["airdata_urls"] = tuple(url.strip() for url in airdata_urls if url.strip())
    if interval is not None:
        overrides["refresh_interval"] = interval
    if log_level:
        overrides["log_level"] = log_level.strip().upper()
    return validate_settings(replace(base, **overrides))
