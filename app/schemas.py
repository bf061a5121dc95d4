"""Pydantic schemas for payloads exchanged with Awair devices."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.records import AirReading


class AirDataPayload(BaseModel):
    """Body returned by the ``/air-data/latest`` endpoint of the local API.

    Unknown keys (``dew_point``, ``abs_humid``, ``pm10_est`` and friends) are
    ignored; every field declared here is required.
    """

    model_config = ConfigDict(extra="ignore")

    timestamp: datetime
    score: float = Field(..., description="Awair score, 0-100.")
    temp: float = Field(..., description="Temperature in degrees celsius.")
    humid: float = Field(..., description="Relative humidity in percent.")
    co2: float = Field(..., description="CO2 in parts per million.")
    voc: float = Field(..., description="Total VOC in parts per billion.")
    pm25: float = Field(..., description="PM2.5 in micrograms per cubic meter.")

    def to_reading(self) -> AirReading:
        return AirReading(
            timestamp=self.timestamp,
            score=self.score,
            temp=self.temp,
            humid=self.humid,
            co2=self.co2,
            voc=self.voc,
            pm25=self.pm25,
        )
