from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from factories import MemoryStore, make_sample
from weatherops import analytics

NOW = datetime(2024, 3, 10, 18, 0, tzinfo=timezone.utc)


def test_overview_of_empty_window():
    metrics = analytics.overview_metrics(MemoryStore([]), hours=24, now=NOW)

    assert metrics.sample_count == 0
    assert metrics.temp_avg_c is None
    assert metrics.risk_avg is None
    assert metrics.severe_count == 0
    assert metrics.condition_counts == {}
    assert metrics.window_hours == 24


def test_overview_only_counts_samples_inside_window():
    store = MemoryStore(
        [
            make_sample("A", 1, observed_at=NOW - timedelta(hours=1), temp_c=10, condition_label="Clear"),
            make_sample("B", 2, observed_at=NOW - timedelta(hours=5), temp_c=20, condition_label="Rain"),
            make_sample("A", 3, observed_at=NOW - timedelta(hours=30), temp_c=99),
        ]
    )

    metrics = analytics.overview_metrics(store, hours=24, now=NOW)

    assert metrics.sample_count == 2
    assert metrics.temp_avg_c == pytest.approx(15.0)
    assert metrics.condition_counts == {"Clear": 1, "Rain": 1}
    assert metrics.condition_percentages == {"Clear": 50.0, "Rain": 50.0}
    assert store.queries[0]["observed_after"] == NOW - timedelta(hours=24)


def test_trend_series_starts_at_utc_midnight():
    store = MemoryStore(
        [
            make_sample("A", 1, observed_at=datetime(2024, 3, 8, 0, 30, tzinfo=timezone.utc)),
            make_sample("A", 2, observed_at=datetime(2024, 3, 7, 23, 30, tzinfo=timezone.utc)),
            make_sample("A", 3, observed_at=datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc), location_name="Port A"),
        ]
    )

    points = analytics.trend_series(store, days=3, now=NOW)

    assert store.queries[0]["observed_after"] == datetime(2024, 3, 8, tzinfo=timezone.utc)
    assert [p.date for p in points] == [date(2024, 3, 8), date(2024, 3, 10)]
    assert all(p.location_name == "Port A" for p in points)


def test_comparison_rows_sorted_by_name():
    store = MemoryStore(
        [
            make_sample("r1", 1, observed_at=NOW - timedelta(hours=2), location_name="rotterdam Port", precip_mm=2),
            make_sample("r1", 2, observed_at=NOW - timedelta(hours=3), location_name="rotterdam Port", precip_mm=3),
            make_sample("la", 3, observed_at=NOW - timedelta(hours=2), location_name="Los Angeles Port", wind_speed_ms=21),
            make_sample("old", 4, observed_at=NOW - timedelta(days=5), location_name="Ancient"),
        ]
    )

    rows = analytics.comparison(store, days=3, now=NOW)

    assert [row.location_name for row in rows] == ["Los Angeles Port", "rotterdam Port"]
    assert rows[0].severe_count == 1
    assert rows[1].precip_total_mm == pytest.approx(5.0)


def test_comparison_falls_back_to_location_id_for_name():
    rows = analytics.comparison(MemoryStore([make_sample("zz", 1, observed_at=NOW)]), now=NOW)

    assert rows[0].location_name == "zz"


def test_live_window_requests_newest_first():
    store = MemoryStore(
        [
            make_sample("A", 1, observed_at=NOW - timedelta(hours=2), temp_c=1),
            make_sample("A", 2, observed_at=NOW - timedelta(hours=1), temp_c=2),
            make_sample("B", 3, observed_at=NOW - timedelta(hours=7), temp_c=3),
        ]
    )

    samples = analytics.live_window(store, hours=6, now=NOW)

    assert store.queries[0]["order"] == "desc"
    assert [(s.location_id, s.temp_c) for s in samples] == [("A", 2)]


def test_start_of_utc_day_converts_offsets():
    local = datetime(2024, 3, 10, 1, 0, tzinfo=timezone(timedelta(hours=3)))

    assert analytics.start_of_utc_day(local) == datetime(2024, 3, 9, tzinfo=timezone.utc)


def test_window_wider_than_calendar_covers_every_sample():
    store = MemoryStore([make_sample("A", 1, observed_at=NOW - timedelta(days=400), temp_c=4)])

    metrics = analytics.overview_metrics(store, hours=1e12, now=NOW)
    points = analytics.trend_series(store, days=10**12, now=NOW)

    assert metrics.sample_count == 1
    assert store.queries[0]["observed_after"] == datetime.min.replace(tzinfo=timezone.utc)
    assert [point.location_id for point in points] == ["A"]
