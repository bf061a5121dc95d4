from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from app.api import router
from datastore.metric_store import MetricStore
from logging_config import configure_logging
from models.records import AIR_QUALITY_GAUGES
from services.exporter import SnapshotExporter
from services.fetcher import ReadingFetcher
from services.refresher import RefreshLoop
from settings import Settings, get_settings, validate_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    refresher: RefreshLoop = app.state.refresher
    refresher.start()
    try:
        yield
    finally:
        await refresher.stop()
        await app.state.fetcher.aclose()


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[MetricStore] = None,
    fetcher: Optional[ReadingFetcher] = None,
) -> FastAPI:
    settings = validate_settings(settings or get_settings())
    configure_logging(settings.log_level)

    gauges = AIR_QUALITY_GAUGES
    store = store if store is not None else MetricStore(gauge.name for gauge in gauges)
    fetcher = fetcher if fetcher is not None else ReadingFetcher()

    app = FastAPI(
        title="Awair Local API Prometheus Exporter",
        description="Exports sensor data from the Awair Local API to Prometheus.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.fetcher = fetcher
    app.state.exporter = SnapshotExporter(gauges)
    app.state.refresher = RefreshLoop(
        sources=settings.airdata_urls,
        fetcher=fetcher,
        store=store,
        gauges=gauges,
        interval=settings.refresh_interval,
    )
    app.include_router(router)
    logger.info(
        "Exporter configured",
        extra={"metric_count": len(gauges), "interval": settings.refresh_interval},
    )
    return app
