from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError
from requests import Response

from ..entities import RawReading

ModelT = TypeVar("ModelT", bound=BaseModel)


class ProviderError(RuntimeError):
    """Base provider error."""


class QuotaExceeded(ProviderError):
    """Raised when a provider reports a quota/usage limit issue."""


class MissingCredentials(ProviderError):
    """Raised when a provider needs an API key that was not configured."""


def metres_to_km(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value / 1000
    return None


@dataclass
class RequestConfig:
    timeout: float = 5.0


class WeatherProvider:
    """Base class that adds timeouts and response validation for HTTP providers."""

    name = "provider"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def fetch_current(self, latitude: float, longitude: float) -> RawReading:
        raise NotImplementedError

    def fetch_historical_range(self, latitude: float, longitude: float, days: int) -> List[RawReading]:
        raise NotImplementedError

    # Helpers ------------------------------------------------------------
    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded(f"{self.name} quota exceeded (HTTP 429)")
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise ProviderError(f"{self.name} request failed: HTTP {response.status_code}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise ProviderError(f"{self.name} request timed out") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise ProviderError(f"{self.name} request failed: {exc}") from exc
        return self._handle_response(response)

    def _validated(self, response: Response, model: Type[ModelT]) -> ModelT:
        try:
            data: Any = response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise ProviderError(f"{self.name} returned invalid JSON") from exc
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            self._log.error("Unexpected %s payload: %s", model.__name__, exc)
            raise ProviderError(f"{self.name} returned an unexpected payload") from exc

    @staticmethod
    def _utcnow() -> datetime:
        return datetime.now(tz=timezone.utc)


__all__ = [
    "MissingCredentials",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "WeatherProvider",
    "metres_to_km",
]
