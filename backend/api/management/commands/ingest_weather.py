"""Management command to ingest weather using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api.views import build_orchestrator, get_sample_store, serialize


class Command(BaseCommand):
    help = "Fetch and store weather readings for all locations, or one"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--location", type=str, help="Location id to ingest")
        parser.add_argument("--days", type=int, help="Ingest one reading per day over the last N days")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        location_id = options.get("location")
        days = options.get("days")
        if days is not None and days <= 0:
            raise CommandError("--days must be a positive integer")

        store = get_sample_store()
        locations = store.find_locations(location_id=location_id)
        if not locations:
            raise CommandError("No matching locations")

        batch = build_orchestrator(store).ingest_many(locations, days=days)
        payload = {"ingested": batch.ingested, "results": serialize(batch.results)}
        self.stdout.write(json.dumps(payload))
