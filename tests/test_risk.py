from __future__ import annotations

import pytest

from factories import make_reading
from weatherops.risk import is_severe, risk_score


def test_wind_boundary_is_inclusive():
    assert is_severe(make_reading(wind_speed_ms=20.0)) is True
    assert is_severe(make_reading(wind_speed_ms=19.99)) is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"precip_mm": 15.0},
        {"temp_c": -10.0},
        {"temp_c": 42.0},
        {"condition_label": "Storm"},
    ],
)
def test_severe_thresholds(kwargs):
    assert is_severe(make_reading(**kwargs)) is True


def test_missing_fields_never_trigger_severity():
    reading = make_reading(temp_c=None, wind_speed_ms=None, precip_mm=None, visibility_km=None)

    assert is_severe(reading) is False
    assert risk_score(reading) == 0


def test_storm_label_must_match_exactly():
    assert is_severe(make_reading(condition_label="Stormy")) is False


def test_reference_scenario_wind_25():
    reading = make_reading(wind_speed_ms=25, precip_mm=0, temp_c=15, visibility_km=None)

    assert risk_score(reading) == 33
    assert is_severe(reading) is True


def test_missing_visibility_scores_as_clear():
    assert risk_score(make_reading(wind_speed_ms=0, visibility_km=None)) == 0
    assert risk_score(make_reading(wind_speed_ms=0, visibility_km=2.5)) == 10
    assert risk_score(make_reading(wind_speed_ms=0, visibility_km=0.5)) == 20


@pytest.mark.parametrize(
    "temp, term",
    [(-6, 20), (-5, 10), (-0.1, 10), (0, 0), (30, 0), (30.5, 10), (35, 10), (35.5, 20)],
)
def test_temperature_brackets(temp, term):
    assert risk_score(make_reading(wind_speed_ms=0, temp_c=temp)) == term


def test_score_is_capped_at_100():
    reading = make_reading(wind_speed_ms=90, precip_mm=80, temp_c=50, visibility_km=0.1)

    assert risk_score(reading) == 100


def test_score_is_monotonic_in_wind_precip_and_temperature_extremity():
    winds = [risk_score(make_reading(wind_speed_ms=w)) for w in range(0, 45)]
    precip = [risk_score(make_reading(precip_mm=p)) for p in range(0, 30)]
    heat = [risk_score(make_reading(temp_c=t)) for t in range(15, 50)]
    cold = [risk_score(make_reading(temp_c=t)) for t in range(15, -30, -1)]

    for series in (winds, precip, heat, cold):
        assert series == sorted(series)
        assert all(0 <= value <= 100 for value in series)


def test_score_is_deterministic():
    reading = make_reading(wind_speed_ms=12.3, precip_mm=7.7, temp_c=31, visibility_km=2)

    assert len({risk_score(reading) for _ in range(5)}) == 1
