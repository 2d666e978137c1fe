"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import ComparisonView, IngestView, LiveView, LocationsView, OverviewView, TrendsView

urlpatterns = [
    path("locations", LocationsView.as_view(), name="locations"),
    path("live", LiveView.as_view(), name="live"),
    path("analytics/overview", OverviewView.as_view(), name="analytics-overview"),
    path("analytics/trends", TrendsView.as_view(), name="analytics-trends"),
    path("analytics/comparison", ComparisonView.as_view(), name="analytics-comparison"),
    path("ingest", IngestView.as_view(), name="ingest"),
]
