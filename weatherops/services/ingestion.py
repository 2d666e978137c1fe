from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

import requests

from ..abstractions import ReadingSource, SampleSink
from ..entities import IngestBatch, IngestResult, Location, RawReading
from ..normalizer import normalize
from ..providers.base import ProviderError, QuotaExceeded


class IngestionOrchestrator:
    """Fetch readings per location and hand them, normalized, to a sink.

    The provider is fixed at construction. Every location is ingested on its
    own worker and reports its own outcome; one failing location never
    cancels the others.
    """

    DEFAULT_MAX_WORKERS = 4

    def __init__(
        self,
        provider: ReadingSource,
        *,
        sink: Optional[SampleSink] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.sink = sink
        self.max_workers = max(1, max_workers)
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def fetch_current(self, location: Location) -> RawReading:
        return self.provider.fetch_current(location.latitude, location.longitude)

    def fetch_historical(self, location: Location, days: int) -> List[RawReading]:
        if days <= 0:
            return []
        return list(self.provider.fetch_historical_range(location.latitude, location.longitude, days))

    def ingest_location(self, location: Location, days: Optional[int] = None) -> IngestResult:
        try:
            if days:
                raw = self.fetch_historical(location, days)
            else:
                raw = [self.fetch_current(location)]
            readings = [normalize(item) for item in raw]
        except QuotaExceeded as exc:
            self._log.warning("Provider %s quota exceeded for %s", self.provider.name, location.id)
            return self._failure(location, str(exc))
        except (ProviderError, requests.RequestException) as exc:
            self._log.error("Provider %s failed for %s: %s", self.provider.name, location.id, exc)
            return self._failure(location, str(exc))
        except Exception as exc:  # noqa: BLE001 - any fetch failure stays with its location
            self._log.exception("Fetching readings for %s failed", location.id)
            return self._failure(location, str(exc) or exc.__class__.__name__)

        stored = len(readings)
        if self.sink is not None:
            try:
                stored = self.sink.save_samples(location.id, readings)
            except Exception as exc:  # noqa: BLE001 - storage failures are reported per location
                self._log.exception("Storing readings for %s failed", location.id)
                return self._failure(location, str(exc) or exc.__class__.__name__)
            sources = sorted({reading.source for reading in readings}) or [self.provider.name]
            self._log_fetch(location, True, f"Ingested from {', '.join(sources)}", sources[0])
        self._log.info("Ingested %s reading(s) for %s", stored, location.id)
        return IngestResult(location_id=location.id, status="ok", samples=stored)

    def ingest_many(self, locations: Iterable[Location], days: Optional[int] = None) -> IngestBatch:
        locations = list(locations)
        if not locations:
            return IngestBatch(locations=[], results=[])
        workers = min(self.max_workers, len(locations))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ingest") as pool:
            results = list(pool.map(lambda loc: self.ingest_location(loc, days), locations))
        batch = IngestBatch(locations=locations, results=results)
        self._log.info("Ingestion finished: %s/%s locations ok", batch.ingested, len(locations))
        return batch

    # Helpers ------------------------------------------------------------
    def _failure(self, location: Location, message: str) -> IngestResult:
        self._log_fetch(location, False, message, "ingest")
        return IngestResult(location_id=location.id, status="error", message=message)

    def _log_fetch(self, location: Location, success: bool, message: str, source: str) -> None:
        if self.sink is None:
            return
        try:
            self.sink.log_fetch(location.id, success, message, source)
        except Exception:  # noqa: BLE001 - the fetch outcome stands without its log row
            self._log.exception("Writing fetch log for %s failed", location.id)


__all__ = ["IngestionOrchestrator"]
