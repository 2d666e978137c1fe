"""Group stored samples into (location, UTC day) buckets.

Day boundaries are always UTC, taken from each sample's own timestamp. A
location's configured timezone is not consulted, so two ports on opposite
sides of the date line share the same bucket edges.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .aggregation import build_daily_aggregate
from .entities import DailyAggregate, NormalizedReading, StoredSample
from .normalizer import ensure_utc


def bucket_by_location_and_day(
    samples: Iterable[StoredSample],
    reference_now: Optional[datetime] = None,
) -> List[DailyAggregate]:
    """Build one daily aggregate per observed (location, day).

    ``reference_now`` only trims samples stamped after it; bucket keys always
    come from the sample's own ``observed_at``.
    """
    cutoff = ensure_utc(reference_now) if reference_now is not None else None
    buckets: Dict[Tuple[str, date], List[NormalizedReading]] = {}
    names: Dict[str, str] = {}

    for sample in samples:
        observed_at = ensure_utc(sample.observed_at)
        if cutoff is not None and observed_at > cutoff:
            continue
        key = (sample.location_id, observed_at.date())
        buckets.setdefault(key, []).append(sample.reading)
        if sample.location_name:
            names[sample.location_id] = sample.location_name

    points: List[DailyAggregate] = []
    for (location_id, day), readings in buckets.items():
        point = build_daily_aggregate(location_id, day, readings, location_name=names.get(location_id))
        if point is not None:
            points.append(point)

    # sorted() is stable, so same-day buckets keep first-seen order
    return sorted(points, key=lambda point: point.date)


__all__ = ["bucket_by_location_and_day"]
