"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

METRIC_NAMESPACE = "awair"
METRIC_SUBSYSTEM = "sensors"
SOURCE_LABEL = "airdata_url"


@dataclass(frozen=True, slots=True)
class GaugeDefinition:
    """A tracked gauge and the reading field that feeds it."""

    name: str
    field: str
    documentation: str


AIR_QUALITY_GAUGES: Tuple[GaugeDefinition, ...] = (
    GaugeDefinition("score", "score", "Current Awair Score"),
    GaugeDefinition("temp", "temp", "Current temperature in celcius"),
    GaugeDefinition("humidity", "humid", "Current relative humidity"),
    GaugeDefinition("co2", "co2", "Current CO2 measurement in parts per million"),
    GaugeDefinition(
        "voc",
        "voc",
        "Current Volatile Organic Compound measurement in parts per billion",
    ),
    GaugeDefinition(
        "pm25",
        "pm25",
        "Current concentration of 2.5 micron particles in micrograms per meter cubed",
    ),
)


@dataclass(slots=True)
class AirReading:
    """A single observation returned by an Awair local air-data endpoint."""

    timestamp: datetime
    score: float
    temp: float
    humid: float
    co2: float
    voc: float
    pm25: float

    def gauge_values(
        self, gauges: Sequence[GaugeDefinition] = AIR_QUALITY_GAUGES
    ) -> Dict[str, float]:
        return {gauge.name: float(getattr(self, gauge.field)) for gauge in gauges}


@dataclass(frozen=True, slots=True)
class MetricEntry:
    metric: str
    source: str
    value: float


@dataclass(frozen=True)
class MetricSnapshot:
    """Point-in-time copy of every gauge value held by the store."""

    entries: Tuple[MetricEntry, ...] = ()

    def __iter__(self) -> Iterator[MetricEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def for_metric(self, metric: str) -> Iterable[MetricEntry]:
        return (entry for entry in self.entries if entry.metric == metric)

    def get(self, metric: str, source: str) -> Optional[float]:
        for entry in self.entries:
            if entry.metric == metric and entry.source == source:
                return entry.value
        return None

    def sources(self) -> list[str]:
        return sorted({entry.source for entry in self.entries})
