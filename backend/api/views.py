"""REST API views for the weather risk dashboard."""
from __future__ import annotations

import math
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.core import models
from weatherops import analytics
from weatherops.providers.base import RequestConfig
from weatherops.providers.registry import build_provider
from weatherops.services.ingestion import IngestionOrchestrator


def get_sample_store() -> models.SampleRepository:
    return models.SampleRepository(models.get_session_factory(settings.WEATHER_DATABASE_URL))


def build_orchestrator(store: Optional[models.SampleRepository] = None) -> IngestionOrchestrator:
    provider = build_provider(
        settings.WEATHER_PROVIDER,
        api_key=settings.WEATHER_API_KEY,
        request_config=RequestConfig(timeout=settings.WEATHER_REQUEST_TIMEOUT),
    )
    return IngestionOrchestrator(
        provider,
        sink=store or get_sample_store(),
        max_workers=settings.INGEST_MAX_WORKERS,
    )


def serialize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {key: serialize(item) for key, item in asdict(value).items()}
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if isinstance(value, datetime):
        return value.astimezone(settings.DEFAULT_TIMEZONE).isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def positive_number(request, name: str, default: float) -> float:
    """Read a positive query parameter, falling back to ``default``."""
    raw = request.query_params.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


class LocationsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        locations = get_sample_store().find_locations()
        return Response({"locations": serialize(locations)}, status=status.HTTP_200_OK)


class LiveView(APIView):
    """Latest reading per location within the lookback window."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        hours = positive_number(request, "hours", analytics.DEFAULT_LIVE_HOURS)
        samples = analytics.live_window(get_sample_store(), hours=hours)
        return Response({"samples": serialize(samples)}, status=status.HTTP_200_OK)


class OverviewView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        hours = positive_number(request, "hours", analytics.DEFAULT_OVERVIEW_HOURS)
        metrics = analytics.overview_metrics(get_sample_store(), hours=hours)
        return Response(serialize(metrics), status=status.HTTP_200_OK)


class TrendsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        days = max(1, int(positive_number(request, "days", analytics.DEFAULT_TREND_DAYS)))
        points = analytics.trend_series(get_sample_store(), days=days)
        return Response({"points": serialize(points)}, status=status.HTTP_200_OK)


class ComparisonView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        days = positive_number(request, "days", analytics.DEFAULT_COMPARISON_DAYS)
        rows = analytics.comparison(get_sample_store(), days=days)
        return Response({"rows": serialize(rows)}, status=status.HTTP_200_OK)


class IngestView(APIView):
    """Fetch fresh readings for all locations, or one, and store them."""

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        location_id = request.query_params.get("location_id") or request.query_params.get("locationId")
        # no (or an invalid) days parameter means a current-conditions fetch
        days = int(positive_number(request, "days", 0)) or None

        store = get_sample_store()
        locations = store.find_locations(location_id=location_id)
        if not locations:
            return Response({"error": "No matching locations"}, status=status.HTTP_404_NOT_FOUND)

        batch = build_orchestrator(store).ingest_many(locations, days=days)
        return Response(
            {"ingested": batch.ingested, "results": serialize(batch.results)},
            status=status.HTTP_200_OK,
        )
