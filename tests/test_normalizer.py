from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from weatherops.entities import RawReading
from weatherops.normalizer import condition_label, normalize, normalize_sample, to_finite_number_or_null


@pytest.mark.parametrize(
    "value, expected",
    [
        (12, 12.0),
        (-3.5, -3.5),
        ("4.25", 4.25),
        (Decimal("1.5"), 1.5),
        (None, None),
        ("", None),
        ("   ", None),
        ("n/a", None),
        (float("nan"), None),
        (float("inf"), None),
        (float("-inf"), None),
        ("NaN", None),
        (True, None),
        ([1], None),
        ({"v": 1}, None),
    ],
)
def test_to_finite_number_or_null(value, expected):
    assert to_finite_number_or_null(value) == expected


@pytest.mark.parametrize(
    "code, label",
    [
        ("Thunderstorm", "Storm"),
        ("thunder showers", "Storm"),
        ("storm with rain", "Storm"),
        ("Light rain and clouds", "Rain"),
        ("Heavy snow fall", "Snow"),
        ("MIST", "Fog"),
        ("Depositing rime fog", "Fog"),
        ("Overcast clouds", "Cloudy"),
        ("Clear sky", "Clear"),
        ("Haze", "Haze"),
        ("63", "63"),
    ],
)
def test_condition_label_priority(code, label):
    assert condition_label(code) == label


def test_condition_label_is_idempotent_for_closed_vocabulary():
    for label in ("Storm", "Rain", "Snow", "Fog", "Cloudy", "Clear"):
        assert condition_label(label) == label


def test_condition_label_handles_missing_code():
    assert condition_label(None) == "unknown"


def test_normalize_never_produces_nan():
    raw = RawReading(
        observed_at=datetime(2024, 1, 1, 6, 0),
        temp_c=float("nan"),
        wind_speed_ms="fast",
        precip_mm=float("inf"),
        visibility_km=None,
        condition_code="Rain",
        source=None,
    )

    reading = normalize(raw)

    for value in (reading.temp_c, reading.wind_speed_ms, reading.precip_mm, reading.visibility_km):
        assert value is None or not math.isnan(value)
    assert reading.temp_c is None
    assert reading.wind_speed_ms is None
    assert reading.precip_mm is None
    assert reading.visibility_km is None
    assert reading.source == "unknown"
    assert reading.condition_label == "Rain"
    assert reading.observed_at.tzinfo == timezone.utc


def test_normalize_keeps_null_as_null_not_zero():
    raw = RawReading(observed_at=datetime(2024, 1, 1, tzinfo=timezone.utc), temp_c=None, wind_speed_ms=0)

    reading = normalize(raw)

    assert reading.temp_c is None
    assert reading.wind_speed_ms == 0.0


def test_normalize_sample_from_stored_row():
    row = {
        "observed_at": "2024-03-10T12:00:00.000000+00:00",
        "temp_c": 21.0,
        "wind_speed_ms": None,
        "precip_mm": "0.4",
        "visibility_km": 8,
        "condition_code": "Overcast clouds",
        "source": "",
    }

    reading = normalize_sample(row)

    assert reading.observed_at == datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert reading.precip_mm == pytest.approx(0.4)
    assert reading.wind_speed_ms is None
    assert reading.condition_label == "Cloudy"
    assert reading.source == "unknown"
