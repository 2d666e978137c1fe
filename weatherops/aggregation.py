from __future__ import annotations

import json
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from .entities import DailyAggregate, NormalizedReading, Summary
from .risk import is_severe, risk_score, round_half_up


def _present(values: Iterable[Optional[float]]) -> List[float]:
    return [v for v in values if v is not None]


def _average(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def summarize_conditions(readings: Iterable[NormalizedReading]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for reading in readings:
        counts[reading.condition_label] = counts.get(reading.condition_label, 0) + 1
    return counts


def condition_percentages(counts: Dict[str, int]) -> Dict[str, float]:
    total = sum(counts.values())
    if not total:
        return {}
    return {label: round(count * 100 / total, 1) for label, count in counts.items()}


def aggregate(readings: Iterable[NormalizedReading]) -> Optional[Summary]:
    """Summarize a window of readings.

    Every numeric statistic ignores missing values for that field only, so a
    reading without wind still counts towards the temperature mean. Returns
    ``None`` for an empty window instead of a zero-filled summary.
    """
    readings = list(readings)
    if not readings:
        return None

    temps = _present(r.temp_c for r in readings)
    winds = _present(r.wind_speed_ms for r in readings)
    precip = _present(r.precip_mm for r in readings)
    visibility = _present(r.visibility_km for r in readings)
    risks = [risk_score(r) for r in readings]

    return Summary(
        count=len(readings),
        temp_avg_c=_average(temps),
        temp_min_c=min(temps) if temps else None,
        temp_max_c=max(temps) if temps else None,
        wind_avg_ms=_average(winds),
        precip_total_mm=sum(precip) if precip else None,
        visibility_avg_km=_average(visibility),
        condition_counts=summarize_conditions(readings),
        severe_count=sum(1 for r in readings if is_severe(r)),
        risk_avg=sum(risks) / len(risks),
    )


def build_daily_aggregate(
    location_id: str,
    day: date,
    readings: Iterable[NormalizedReading],
    location_name: Optional[str] = None,
) -> Optional[DailyAggregate]:
    summary = aggregate(readings)
    if summary is None:
        return None
    return DailyAggregate(
        location_id=location_id,
        date=day,
        temp_min_c=summary.temp_min_c,
        temp_max_c=summary.temp_max_c,
        temp_avg_c=summary.temp_avg_c,
        wind_avg_ms=summary.wind_avg_ms,
        precip_total_mm=summary.precip_total_mm,
        visibility_avg_km=summary.visibility_avg_km,
        condition_counts=json.dumps(summary.condition_counts),
        risk_score=round_half_up(summary.risk_avg),
        severe_flag=summary.severe_count > 0,
        location_name=location_name,
    )


__all__ = ["aggregate", "build_daily_aggregate", "condition_percentages", "summarize_conditions"]
