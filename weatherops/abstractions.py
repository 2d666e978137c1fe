"""Collaborator interfaces the engine depends on."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from .entities import Location, NormalizedReading, RawReading, StoredSample


class SampleStore(Protocol):
    """Read side of the sample repository."""

    def find_samples(
        self,
        *,
        location_id: Optional[str] = None,
        observed_after: Optional[datetime] = None,
        order: Optional[str] = None,
    ) -> List[StoredSample]:
        """Return samples observed at or after ``observed_after``.

        ``order`` is ``"asc"``, ``"desc"`` or ``None`` for no guarantee.
        """
        ...

    def find_locations(self, *, location_id: Optional[str] = None) -> List[Location]:
        """Return locations, optionally restricted to a single id."""
        ...


class SampleSink(Protocol):
    """Write side used by ingestion."""

    def save_samples(self, location_id: str, readings: Sequence[NormalizedReading]) -> int:
        """Persist readings and return how many were written."""
        ...

    def log_fetch(self, location_id: str, success: bool, message: str, source: str) -> None:
        """Record the outcome of one ingestion attempt."""
        ...


class ReadingSource(Protocol):
    """A data source capable of returning raw readings."""

    name: str

    def fetch_current(self, latitude: float, longitude: float) -> RawReading:
        ...

    def fetch_historical_range(self, latitude: float, longitude: float, days: int) -> List[RawReading]:
        ...


__all__ = ["ReadingSource", "SampleSink", "SampleStore"]
