"""Turn provider readings and stored rows into :class:`NormalizedReading`."""
from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional

from .entities import NormalizedReading, RawReading

UNKNOWN_SOURCE = "unknown"
UNKNOWN_CONDITION = "unknown"

# (label, substrings) checked in order; the first hit wins.
_CONDITION_RULES = (
    ("Storm", ("storm", "thunder")),
    ("Rain", ("rain",)),
    ("Snow", ("snow",)),
    ("Fog", ("fog", "mist")),
    ("Cloudy", ("cloud",)),
    ("Clear", ("clear",)),
)

CONDITION_LABELS = tuple(label for label, _ in _CONDITION_RULES)


def to_finite_number_or_null(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def condition_label(code: Optional[str]) -> str:
    if code is None:
        code = UNKNOWN_CONDITION
    code = str(code)
    lowered = code.lower()
    for label, needles in _CONDITION_RULES:
        if any(needle in lowered for needle in needles):
            return label
    return code


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def normalize(raw: RawReading) -> NormalizedReading:
    return NormalizedReading(
        observed_at=ensure_utc(raw.observed_at),
        temp_c=to_finite_number_or_null(raw.temp_c),
        wind_speed_ms=to_finite_number_or_null(raw.wind_speed_ms),
        precip_mm=to_finite_number_or_null(raw.precip_mm),
        visibility_km=to_finite_number_or_null(raw.visibility_km),
        condition_label=condition_label(raw.condition_code),
        source=raw.source or UNKNOWN_SOURCE,
    )


def normalize_sample(row: Mapping[str, Any]) -> NormalizedReading:
    """Normalize a persisted sample row.

    Rows carry the label under ``condition_code``; it is re-labelled so rows
    written before a vocabulary change still land in the closed set.
    """
    return NormalizedReading(
        observed_at=parse_timestamp(row["observed_at"]),
        temp_c=to_finite_number_or_null(row.get("temp_c")),
        wind_speed_ms=to_finite_number_or_null(row.get("wind_speed_ms")),
        precip_mm=to_finite_number_or_null(row.get("precip_mm")),
        visibility_km=to_finite_number_or_null(row.get("visibility_km")),
        condition_label=condition_label(row.get("condition_code")),
        source=row.get("source") or UNKNOWN_SOURCE,
    )


__all__ = [
    "CONDITION_LABELS",
    "UNKNOWN_SOURCE",
    "condition_label",
    "ensure_utc",
    "normalize",
    "normalize_sample",
    "parse_timestamp",
    "to_finite_number_or_null",
]
