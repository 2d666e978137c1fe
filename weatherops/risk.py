"""Severity flag and bounded risk score for a single reading."""
from __future__ import annotations

import math

from .entities import NormalizedReading

SEVERE_WIND_MS = 20.0
SEVERE_PRECIP_MM = 15.0
SEVERE_COLD_C = -10.0
SEVERE_HEAT_C = 42.0

# Missing visibility is scored as clear air. This is a policy, not a fact
# about the reading.
DEFAULT_VISIBILITY_KM = 10.0

MAX_RISK = 100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_severe(reading: NormalizedReading) -> bool:
    wind = reading.wind_speed_ms if reading.wind_speed_ms is not None else 0.0
    precip = reading.precip_mm if reading.precip_mm is not None else 0.0
    temp = reading.temp_c if reading.temp_c is not None else 0.0
    return (
        wind >= SEVERE_WIND_MS
        or precip >= SEVERE_PRECIP_MM
        or temp <= SEVERE_COLD_C
        or temp >= SEVERE_HEAT_C
        or reading.condition_label == "Storm"
    )


def _wind_term(wind: float) -> float:
    return min(wind / 30 * 40, 40.0)


def _precip_term(precip: float) -> float:
    return min(precip / 20 * 30, 30.0)


def _temperature_term(temp: float) -> float:
    if temp < -5 or temp > 35:
        return 20.0
    if temp < 0 or temp > 30:
        return 10.0
    return 0.0


def _visibility_term(visibility: float) -> float:
    if visibility < 1:
        return 20.0
    if visibility < 3:
        return 10.0
    return 0.0


def risk_score(reading: NormalizedReading) -> int:
    """Additive 0-100 score; each term is capped before summing."""
    wind = reading.wind_speed_ms if reading.wind_speed_ms is not None else 0.0
    precip = reading.precip_mm if reading.precip_mm is not None else 0.0
    temp = reading.temp_c if reading.temp_c is not None else 0.0
    visibility = reading.visibility_km if reading.visibility_km is not None else DEFAULT_VISIBILITY_KM
    total = _wind_term(wind) + _precip_term(precip) + _temperature_term(temp) + _visibility_term(visibility)
    return max(0, min(MAX_RISK, round_half_up(total)))


__all__ = ["DEFAULT_VISIBILITY_KM", "is_severe", "risk_score", "round_half_up"]
