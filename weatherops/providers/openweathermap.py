"""OpenWeatherMap provider (current weather and One Call time machine)."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from .base import MissingCredentials, ProviderError, WeatherProvider, metres_to_km
from .schemas import OwmCondition, OwmCurrentResponse, OwmPrecip, OwmTimemachineResponse
from ..entities import RawReading


def _first_condition(conditions: List[OwmCondition]) -> str:
    if conditions and conditions[0].main:
        return conditions[0].main
    return "unknown"


def _precipitation(rain: Optional[OwmPrecip], snow: Optional[OwmPrecip]) -> Any:
    for bucket in (rain, snow):
        if bucket is not None and bucket.one_hour is not None:
            return bucket.one_hour
    return 0.0


class OpenWeatherMapProvider(WeatherProvider):
    name = "openweathermap"
    base_url = "https://api.openweathermap.org/data/2.5/weather"
    history_url = "https://api.openweathermap.org/data/3.0/onecall/timemachine"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        history_url: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url or self.base_url
        self.history_url = history_url or self.history_url

    def fetch_current(self, latitude: float, longitude: float) -> RawReading:
        params = {"lat": latitude, "lon": longitude, "units": "metric", "appid": self._require_key()}
        response = self._request("GET", self.base_url, params=params)
        data = self._validated(response, OwmCurrentResponse)
        return RawReading(
            observed_at=self._parse_timestamp(data.dt),
            temp_c=data.main.temp,
            wind_speed_ms=data.wind.speed,
            precip_mm=_precipitation(data.rain, data.snow),
            visibility_km=metres_to_km(data.visibility),
            condition_code=_first_condition(data.weather),
            source=self.name,
        )

    def fetch_historical_range(self, latitude: float, longitude: float, days: int) -> List[RawReading]:
        """One time-machine call per day, oldest first, ending with now."""
        if days <= 0:
            return []
        api_key = self._require_key()
        now = self._utcnow()
        readings: List[RawReading] = []
        for offset in range(days, -1, -1):
            moment = now - timedelta(days=offset)
            params = {
                "lat": latitude,
                "lon": longitude,
                "dt": int(moment.timestamp()),
                "units": "metric",
                "appid": api_key,
            }
            response = self._request("GET", self.history_url, params=params)
            for point in self._validated(response, OwmTimemachineResponse).data[:1]:
                readings.append(
                    RawReading(
                        observed_at=self._parse_timestamp(point.dt),
                        temp_c=point.temp,
                        wind_speed_ms=point.wind_speed,
                        precip_mm=_precipitation(point.rain, point.snow),
                        visibility_km=metres_to_km(point.visibility),
                        condition_code=_first_condition(point.weather),
                        source=f"{self.name}:history",
                    )
                )
        return readings

    def _require_key(self) -> str:
        if not self.api_key:
            raise MissingCredentials("WEATHER_API_KEY missing for openweathermap provider")
        return self.api_key

    def _parse_timestamp(self, value: Optional[int]) -> datetime:
        if value is None:
            return self._utcnow()
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ProviderError(f"{self.name} returned an invalid timestamp: {value}") from exc


__all__ = ["OpenWeatherMapProvider"]
