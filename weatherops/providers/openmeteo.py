from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Any, List, Optional

from .base import WeatherProvider, metres_to_km
from .schemas import OpenMeteoCurrentResponse, OpenMeteoDailyResponse
from ..entities import RawReading
from ..normalizer import ensure_utc

# WMO weather interpretation codes as documented by Open-Meteo.
WMO_CONDITIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast clouds",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle rain",
    53: "Moderate drizzle rain",
    55: "Dense drizzle rain",
    56: "Freezing drizzle rain",
    57: "Dense freezing drizzle rain",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

CURRENT_FIELDS = "temperature_2m,wind_speed_10m,precipitation,visibility,weather_code"
DAILY_FIELDS = "temperature_2m_mean,precipitation_sum,wind_speed_10m_max,weather_code"


def describe_weather_code(code: Any) -> str:
    if code is None:
        return "unknown"
    try:
        return WMO_CONDITIONS.get(int(code), str(code))
    except (TypeError, ValueError):
        return str(code)


def _safe_index(values: List[Any], index: int) -> Any:
    try:
        return values[index]
    except IndexError:
        return None


class OpenMeteoProvider(WeatherProvider):
    name = "open-meteo"
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    def fetch_current(self, latitude: float, longitude: float) -> RawReading:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "wind_speed_unit": "ms",
            "timezone": "UTC",
        }
        response = self._request("GET", self.base_url, params=params)
        current = self._validated(response, OpenMeteoCurrentResponse).current
        return RawReading(
            observed_at=self._as_utc(current.time),
            temp_c=current.temperature_2m,
            wind_speed_ms=current.wind_speed_10m,
            precip_mm=current.precipitation,
            visibility_km=metres_to_km(current.visibility),
            condition_code=describe_weather_code(current.weather_code),
            source=self.name,
        )

    def fetch_historical_range(self, latitude: float, longitude: float, days: int) -> List[RawReading]:
        """Return one daily reading for each day from ``days`` ago up to today."""
        if days <= 0:
            return []
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": DAILY_FIELDS,
            "past_days": days,
            "forecast_days": 1,
            "wind_speed_unit": "ms",
            "timezone": "UTC",
        }
        response = self._request("GET", self.base_url, params=params)
        daily = self._validated(response, OpenMeteoDailyResponse).daily
        readings: List[RawReading] = []
        for idx, day in enumerate(daily.time):
            readings.append(
                RawReading(
                    observed_at=datetime.combine(day, time.min, tzinfo=timezone.utc),
                    temp_c=_safe_index(daily.temperature_2m_mean, idx),
                    wind_speed_ms=_safe_index(daily.wind_speed_10m_max, idx),
                    precip_mm=_safe_index(daily.precipitation_sum, idx),
                    visibility_km=None,
                    condition_code=describe_weather_code(_safe_index(daily.weather_code, idx)),
                    source=f"{self.name}:daily",
                )
            )
        return readings

    def _as_utc(self, value: Optional[datetime]) -> datetime:
        if value is None:
            return self._utcnow()
        return ensure_utc(value)


__all__ = ["OpenMeteoProvider", "describe_weather_code"]
