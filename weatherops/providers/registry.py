from __future__ import annotations

from typing import Dict, Optional, Type

import requests

from .base import RequestConfig, WeatherProvider
from .openmeteo import OpenMeteoProvider
from .openweathermap import OpenWeatherMapProvider

DEFAULT_PROVIDER = OpenMeteoProvider.name

PROVIDERS: Dict[str, Type[WeatherProvider]] = {
    OpenMeteoProvider.name: OpenMeteoProvider,
    OpenWeatherMapProvider.name: OpenWeatherMapProvider,
}


def build_provider(
    name: Optional[str] = None,
    *,
    api_key: Optional[str] = None,
    session: Optional[requests.Session] = None,
    request_config: Optional[RequestConfig] = None,
) -> WeatherProvider:
    """Instantiate the provider registered under ``name``."""
    key = (name or DEFAULT_PROVIDER).strip().lower()
    if key == OpenWeatherMapProvider.name:
        return OpenWeatherMapProvider(api_key=api_key, session=session, request_config=request_config)
    if key == OpenMeteoProvider.name:
        return OpenMeteoProvider(session=session, request_config=request_config)
    raise ValueError(f"Unknown weather provider: {name!r} (expected one of {', '.join(sorted(PROVIDERS))})")


__all__ = ["DEFAULT_PROVIDER", "PROVIDERS", "build_provider"]
