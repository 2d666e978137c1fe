from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class LocationType(str, Enum):
    PORT = "PORT"
    ROUTE = "ROUTE"


@dataclass(frozen=True)
class Location:
    """Reference data for a monitored port or shipping route."""

    id: str
    name: str
    latitude: float
    longitude: float
    location_type: LocationType = LocationType.PORT
    timezone: str = "Etc/UTC"


@dataclass(frozen=True)
class RawReading:
    """Provider reading before normalization.

    Numeric fields are deliberately untyped: providers hand over whatever the
    upstream payload contained and the normalizer decides what is usable.
    """

    observed_at: datetime
    temp_c: Any = None
    wind_speed_ms: Any = None
    precip_mm: Any = None
    visibility_km: Any = None
    condition_code: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class NormalizedReading:
    """Canonical weather reading.

    Units are fixed so providers are interchangeable:
    - temperature in Celsius
    - wind speed in metres per second (m/s)
    - precipitation in millimetres (mm)
    - visibility in kilometres (km)
    """

    observed_at: datetime
    temp_c: Optional[float]
    wind_speed_ms: Optional[float]
    precip_mm: Optional[float]
    visibility_km: Optional[float]
    condition_label: str
    source: str = "unknown"


@dataclass(frozen=True)
class StoredSample:
    id: int
    location_id: str
    reading: NormalizedReading
    location_name: Optional[str] = None

    @property
    def observed_at(self) -> datetime:
        return self.reading.observed_at


@dataclass(frozen=True)
class Summary:
    count: int
    temp_avg_c: Optional[float]
    temp_min_c: Optional[float]
    temp_max_c: Optional[float]
    wind_avg_ms: Optional[float]
    precip_total_mm: Optional[float]
    visibility_avg_km: Optional[float]
    condition_counts: Dict[str, int]
    severe_count: int
    risk_avg: float


@dataclass(frozen=True)
class DailyAggregate:
    location_id: str
    date: date
    temp_min_c: Optional[float]
    temp_max_c: Optional[float]
    temp_avg_c: Optional[float]
    wind_avg_ms: Optional[float]
    precip_total_mm: Optional[float]
    visibility_avg_km: Optional[float]
    condition_counts: str
    risk_score: int
    severe_flag: bool
    location_name: Optional[str] = None


@dataclass(frozen=True)
class OverviewMetrics:
    window_hours: float
    sample_count: int
    temp_avg_c: Optional[float]
    wind_avg_ms: Optional[float]
    precip_total_mm: Optional[float]
    visibility_avg_km: Optional[float]
    risk_avg: Optional[float]
    severe_count: int
    condition_counts: Dict[str, int] = field(default_factory=dict)
    condition_percentages: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ComparisonRow:
    location_id: str
    location_name: str
    temp_avg_c: Optional[float]
    wind_avg_ms: Optional[float]
    precip_total_mm: Optional[float]
    visibility_avg_km: Optional[float]
    risk_avg: Optional[float]
    severe_count: int


@dataclass(frozen=True)
class LiveSample:
    location_id: str
    location_name: str
    observed_at: datetime
    temp_c: Optional[float]
    wind_speed_ms: Optional[float]
    precip_mm: Optional[float]
    visibility_km: Optional[float]
    condition_label: str
    severe: bool
    risk: int


@dataclass(frozen=True)
class IngestResult:
    location_id: str
    status: str
    message: Optional[str] = None
    samples: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class IngestBatch:
    locations: List[Location]
    results: List[IngestResult]

    @property
    def ingested(self) -> int:
        return sum(1 for result in self.results if result.ok)


__all__ = [
    "ComparisonRow",
    "DailyAggregate",
    "IngestBatch",
    "IngestResult",
    "LiveSample",
    "Location",
    "LocationType",
    "NormalizedReading",
    "OverviewMetrics",
    "RawReading",
    "StoredSample",
    "Summary",
]
