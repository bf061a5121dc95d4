"""Background refresh loop that keeps the metric store current."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from datastore.metric_store import MetricStore
from models.records import AIR_QUALITY_GAUGES, GaugeDefinition
from services.fetcher import FetchError, ReadingFetcher
from settings import DEFAULT_REFRESH_INTERVAL

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    """Outcome of one pass over every configured source."""

    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)


class RefreshLoop:
    """Polls every source, writes successes into the store, then sleeps.

    Failing sources are logged and retried on the next cycle; their existing
    entries are left in place.
    """

    def __init__(
        self,
        sources: Sequence[str],
        fetcher: ReadingFetcher,
        store: MetricStore,
        gauges: Sequence[GaugeDefinition] = AIR_QUALITY_GAUGES,
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ) -> None:
        if not sources:
            raise ValueError("RefreshLoop requires at least one source.")
        self.sources = tuple(sources)
        self.fetcher = fetcher
        self.store = store
        self.gauges = tuple(gauges)
        self.interval = interval
        self._stopping = asyncio.Event()
        self._task: Optional[asyncio.Task[None]] = None

    async def run_once(self) -> CycleReport:
        report = CycleReport()
        for source in self.sources:
            try:
                reading = await self.fetcher.fetch(source)
            except FetchError as exc:
                report.failed[source] = exc.reason
                logger.warning(
                    "Unable to get air-data",
                    extra={"source": source, "reason": exc.reason},
                )
                continue
            except Exception as exc:  # noqa: BLE001 - other sources still get polled
                report.failed[source] = f"unexpected error: {exc!r}"
                logger.exception("Unexpected error fetching air-data", extra={"source": source})
                continue

            values = reading.gauge_values(self.gauges)
            self.store.update(source, values)
            report.succeeded.append(source)
            logger.debug(
                "Updated gauges",
                extra={"source": source, "metric_count": len(values)},
            )

        logger.debug(
            "Refresh cycle complete",
            extra={"succeeded": len(report.succeeded), "failed": len(report.failed)},
        )
        return report

    async def run(self) -> None:
        logger.info("Refresh loop started", extra={"interval": self.interval})
        while not self._stopping.is_set():
            try:
                await self.run_once()
            except Exception:  # noqa: BLE001 - a broken cycle must not end polling
                logger.exception("Refresh cycle failed")
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue
        logger.info("Refresh loop stopped")

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._stopping = asyncio.Event()
            self._task = asyncio.create_task(self.run(), name="refresh-loop")
        return self._task

    async def stop(self) -> None:
        """Wake the loop from its sleep and wait for it to finish the current cycle."""
        self._stopping.set()
        task, self._task = self._task, None
        if task is not None:
            await task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
