from __future__ import annotations

from typing import Dict, Iterable

from .entities import LiveSample, StoredSample
from .risk import is_severe, risk_score


def latest_per_location(samples: Iterable[StoredSample]) -> Dict[str, LiveSample]:
    """Keep the first sample seen per location.

    Callers must pass samples newest first; nothing is sorted here.
    """
    latest: Dict[str, LiveSample] = {}
    for sample in samples:
        if sample.location_id in latest:
            continue
        reading = sample.reading
        latest[sample.location_id] = LiveSample(
            location_id=sample.location_id,
            location_name=sample.location_name or sample.location_id,
            observed_at=reading.observed_at,
            temp_c=reading.temp_c,
            wind_speed_ms=reading.wind_speed_ms,
            precip_mm=reading.precip_mm,
            visibility_km=reading.visibility_km,
            condition_label=reading.condition_label,
            severe=is_severe(reading),
            risk=risk_score(reading),
        )
    return latest


__all__ = ["latest_per_location"]
