"""Default monitored locations."""
from __future__ import annotations

from typing import Dict, List, Optional

from backend.core import models
from weatherops.entities import Location, LocationType

DEFAULT_LOCATIONS: List[Dict[str, object]] = [
    {
        "name": "Los Angeles Port",
        "location_type": LocationType.PORT,
        "latitude": 33.7406,
        "longitude": -118.2775,
        "timezone": "America/Los_Angeles",
    },
    {
        "name": "New York Harbor",
        "location_type": LocationType.PORT,
        "latitude": 40.7128,
        "longitude": -74.006,
        "timezone": "America/New_York",
    },
    {
        "name": "Rotterdam Port",
        "location_type": LocationType.PORT,
        "latitude": 51.9244,
        "longitude": 4.4777,
        "timezone": "Europe/Amsterdam",
    },
    {
        "name": "Singapore Hub",
        "location_type": LocationType.PORT,
        "latitude": 1.3521,
        "longitude": 103.8198,
        "timezone": "Asia/Singapore",
    },
    {
        "name": "Pacific Northern Route",
        "location_type": LocationType.ROUTE,
        "latitude": 55.0,
        "longitude": -150.0,
        "timezone": "Etc/UTC",
    },
    {
        "name": "Gulf Coast Corridor",
        "location_type": LocationType.ROUTE,
        "latitude": 29.0,
        "longitude": -90.0,
        "timezone": "America/Chicago",
    },
]


def seed_locations(session_factory: Optional[models.SessionFactory] = None) -> List[Location]:
    """Upsert the default locations by name; safe to run repeatedly."""
    seeded: List[Location] = []
    with models.session_scope(session_factory) as session:
        for entry in DEFAULT_LOCATIONS:
            defaults = {key: value for key, value in entry.items() if key != "name"}
            seeded.append(models.upsert_location(session, name=str(entry["name"]), defaults=defaults))
    return seeded


__all__ = ["DEFAULT_LOCATIONS", "seed_locations"]
