"""Dashboard query windows built on top of a :class:`SampleStore`."""
from __future__ import annotations

import logging
from datetime import datetime, time, timedelta, timezone
from typing import Dict, List, Optional

from .abstractions import SampleStore
from .aggregation import aggregate, condition_percentages
from .bucketing import bucket_by_location_and_day
from .entities import ComparisonRow, DailyAggregate, LiveSample, OverviewMetrics, StoredSample
from .live import latest_per_location
from .normalizer import ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_OVERVIEW_HOURS = 24
DEFAULT_TREND_DAYS = 7
DEFAULT_COMPARISON_DAYS = 3
DEFAULT_LIVE_HOURS = 6


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(tz=timezone.utc)
    return ensure_utc(now)


def start_of_utc_day(value: datetime) -> datetime:
    return datetime.combine(ensure_utc(value).date(), time.min, tzinfo=timezone.utc)


def window_start(end: datetime, *, hours: float = 0, days: float = 0) -> datetime:
    """Return ``end`` minus the window, clamped to the earliest representable instant."""
    try:
        return end - timedelta(hours=hours, days=days)
    except OverflowError:
        return datetime.min.replace(tzinfo=timezone.utc)


def overview_metrics(
    store: SampleStore,
    hours: float = DEFAULT_OVERVIEW_HOURS,
    now: Optional[datetime] = None,
) -> OverviewMetrics:
    since = window_start(_now(now), hours=hours)
    samples = store.find_samples(observed_after=since, order="desc")
    summary = aggregate(sample.reading for sample in samples)
    logger.debug("Overview over %s samples since %s", len(samples), since.isoformat())
    if summary is None:
        return OverviewMetrics(
            window_hours=hours,
            sample_count=0,
            temp_avg_c=None,
            wind_avg_ms=None,
            precip_total_mm=None,
            visibility_avg_km=None,
            risk_avg=None,
            severe_count=0,
        )
    return OverviewMetrics(
        window_hours=hours,
        sample_count=summary.count,
        temp_avg_c=summary.temp_avg_c,
        wind_avg_ms=summary.wind_avg_ms,
        precip_total_mm=summary.precip_total_mm,
        visibility_avg_km=summary.visibility_avg_km,
        risk_avg=summary.risk_avg,
        severe_count=summary.severe_count,
        condition_counts=summary.condition_counts,
        condition_percentages=condition_percentages(summary.condition_counts),
    )


def trend_series(
    store: SampleStore,
    days: int = DEFAULT_TREND_DAYS,
    now: Optional[datetime] = None,
) -> List[DailyAggregate]:
    current = _now(now)
    start = window_start(start_of_utc_day(current), days=days - 1)
    samples = store.find_samples(observed_after=start, order="asc")
    return bucket_by_location_and_day(samples, reference_now=current)


def comparison(
    store: SampleStore,
    days: float = DEFAULT_COMPARISON_DAYS,
    now: Optional[datetime] = None,
) -> List[ComparisonRow]:
    since = window_start(_now(now), days=days)
    grouped: Dict[str, List[StoredSample]] = {}
    for sample in store.find_samples(observed_after=since):
        grouped.setdefault(sample.location_id, []).append(sample)

    rows: List[ComparisonRow] = []
    for location_id, samples in grouped.items():
        summary = aggregate(sample.reading for sample in samples)
        if summary is None:
            continue
        name = next((s.location_name for s in samples if s.location_name), None) or location_id
        rows.append(
            ComparisonRow(
                location_id=location_id,
                location_name=name,
                temp_avg_c=summary.temp_avg_c,
                wind_avg_ms=summary.wind_avg_ms,
                precip_total_mm=summary.precip_total_mm,
                visibility_avg_km=summary.visibility_avg_km,
                risk_avg=summary.risk_avg,
                severe_count=summary.severe_count,
            )
        )
    rows.sort(key=lambda row: row.location_name.casefold())
    return rows


def live_window(
    store: SampleStore,
    hours: float = DEFAULT_LIVE_HOURS,
    now: Optional[datetime] = None,
) -> List[LiveSample]:
    since = window_start(_now(now), hours=hours)
    samples = store.find_samples(observed_after=since, order="desc")
    return list(latest_per_location(samples).values())


__all__ = [
    "DEFAULT_COMPARISON_DAYS",
    "DEFAULT_LIVE_HOURS",
    "DEFAULT_OVERVIEW_HOURS",
    "DEFAULT_TREND_DAYS",
    "comparison",
    "live_window",
    "overview_metrics",
    "start_of_utc_day",
    "trend_series",
    "window_start",
]
