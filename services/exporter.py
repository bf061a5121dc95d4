"""Prometheus text rendering of metric store snapshots."""

from __future__ import annotations

from typing import Iterator, Sequence

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from models.records import (
    AIR_QUALITY_GAUGES,
    METRIC_NAMESPACE,
    METRIC_SUBSYSTEM,
    SOURCE_LABEL,
    GaugeDefinition,
    MetricSnapshot,
)


class _SnapshotCollector(Collector):

    def __init__(self, exporter: "SnapshotExporter", snapshot: MetricSnapshot) -> None:
        self._exporter = exporter
        self._snapshot = snapshot

    def collect(self) -> Iterator[GaugeMetricFamily]:
        for gauge in self._exporter.gauges:
            entries = list(self._snapshot.for_metric(gauge.name))
            if not entries:
                continue
            family = GaugeMetricFamily(
                self._exporter.full_name(gauge),
                gauge.documentation,
                labels=[self._exporter.label],
            )
            for entry in entries:
                family.add_metric([entry.source], entry.value)
            yield family


class SnapshotExporter:
    """Pure renderer: identical snapshots always produce identical bytes."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(
        self,
        gauges: Sequence[GaugeDefinition] = AIR_QUALITY_GAUGES,
        namespace: str = METRIC_NAMESPACE,
        subsystem: str = METRIC_SUBSYSTEM,
        label: str = SOURCE_LABEL,
    ) -> None:
        self.gauges = tuple(gauges)
        self.namespace = namespace
        self.subsystem = subsystem
        self.label = label

    def full_name(self, gauge: GaugeDefinition) -> str:
        return "_".join(part for part in (self.namespace, self.subsystem, gauge.name) if part)

    def render(self, snapshot: MetricSnapshot) -> bytes:
        registry = CollectorRegistry(auto_describe=False)
        registry.register(_SnapshotCollector(self, snapshot))
        return generate_latest(registry)
