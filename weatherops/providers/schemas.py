"""Validated provider response shapes.

One model per upstream payload. Measurement fields stay loosely typed so a
garbage value degrades to ``None`` in the normalizer instead of failing the
whole payload; the structure around them is strict.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


# Open-Meteo -------------------------------------------------------------
class OpenMeteoCurrent(_Payload):
    time: Optional[datetime] = None
    temperature_2m: Any = None
    wind_speed_10m: Any = None
    precipitation: Any = None
    visibility: Any = None
    weather_code: Any = None


class OpenMeteoCurrentResponse(_Payload):
    current: OpenMeteoCurrent


class OpenMeteoDaily(_Payload):
    time: List[date] = Field(default_factory=list)
    temperature_2m_mean: List[Any] = Field(default_factory=list)
    precipitation_sum: List[Any] = Field(default_factory=list)
    wind_speed_10m_max: List[Any] = Field(default_factory=list)
    weather_code: List[Any] = Field(default_factory=list)


class OpenMeteoDailyResponse(_Payload):
    daily: OpenMeteoDaily = Field(default_factory=OpenMeteoDaily)


# OpenWeatherMap ---------------------------------------------------------
class OwmCondition(_Payload):
    main: Optional[str] = None
    description: Optional[str] = None


class OwmMain(_Payload):
    temp: Any = None


class OwmWind(_Payload):
    speed: Any = None


class OwmPrecip(_Payload):
    one_hour: Any = Field(default=None, alias="1h")


class OwmCurrentResponse(_Payload):
    dt: Optional[int] = None
    main: OwmMain = Field(default_factory=OwmMain)
    wind: OwmWind = Field(default_factory=OwmWind)
    rain: Optional[OwmPrecip] = None
    snow: Optional[OwmPrecip] = None
    visibility: Any = None
    weather: List[OwmCondition] = Field(default_factory=list)


class OwmHistoricalPoint(_Payload):
    dt: int
    temp: Any = None
    wind_speed: Any = None
    visibility: Any = None
    rain: Optional[OwmPrecip] = None
    snow: Optional[OwmPrecip] = None
    weather: List[OwmCondition] = Field(default_factory=list)


class OwmTimemachineResponse(_Payload):
    data: List[OwmHistoricalPoint] = Field(default_factory=list)


__all__ = [
    "OpenMeteoCurrentResponse",
    "OpenMeteoDailyResponse",
    "OwmCurrentResponse",
    "OwmTimemachineResponse",
]
