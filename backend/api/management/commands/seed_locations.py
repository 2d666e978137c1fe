"""Management command to upsert the default monitored locations."""
from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand

from backend.core import models
from backend.core.seed import seed_locations


class Command(BaseCommand):
    help = "Create or update the default ports and routes"

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        factory = models.get_session_factory(settings.WEATHER_DATABASE_URL)
        seeded = seed_locations(factory)
        self.stdout.write(f"Seeded {len(seeded)} locations.")
