from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, Mapping, Optional, Tuple

from models.records import MetricEntry, MetricSnapshot


class MetricStore:
    """Latest gauge value per (metric, source), shared by the refresher and scrapes."""

    def __init__(self, metric_names: Iterable[str]) -> None:
        self.metric_names: Tuple[str, ...] = tuple(dict.fromkeys(metric_names))
        if not self.metric_names:
            raise ValueError("MetricStore requires at least one metric name.")
        self._known = frozenset(self.metric_names)
        self._values: Dict[Tuple[str, str], float] = {}
        self._lock = Lock()

    def set(self, metric: str, source: str, value: float) -> None:
        self._check_metric(metric)
        with self._lock:
            self._values[(metric, source)] = float(value)

    def update(self, source: str, values: Mapping[str, float]) -> None:
        """Write every gauge of one reading under a single lock acquisition."""
        for metric in values:
            self._check_metric(metric)
        converted = {(metric, source): float(value) for metric, value in values.items()}
        with self._lock:
            self._values.update(converted)

    def get(self, metric: str, source: str) -> Optional[float]:
        self._check_metric(metric)
        with self._lock:
            return self._values.get((metric, source))

    def snapshot(self) -> MetricSnapshot:
        """Return every entry ordered by metric name, then source."""

        with self._lock:
            items = list(self._values.items())
        items.sort(key=lambda item: item[0])
        return MetricSnapshot(
            entries=tuple(
                MetricEntry(metric=metric, source=source, value=value)
                for (metric, source), value in items
            )
        )

    def sources(self) -> list[str]:
        with self._lock:
            return sorted({source for _, source in self._values})

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def _check_metric(self, metric: str) -> None:
        if metric not in self._known:
            raise KeyError(f"Metric {metric!r} is not tracked by this store.")
