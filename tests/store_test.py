from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from backend.core import models
from backend.core.seed import DEFAULT_LOCATIONS, seed_locations
from factories import make_reading
from weatherops.entities import LocationType

T0 = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def test_seed_is_idempotent(repository):
    first = seed_locations(models.get_session_factory())
    second = seed_locations(models.get_session_factory())

    assert len(first) == len(DEFAULT_LOCATIONS)
    assert [loc.id for loc in first] == [loc.id for loc in second]
    names = [loc.name for loc in repository.find_locations()]
    assert names == sorted(names)
    routes = [loc for loc in repository.find_locations() if loc.location_type is LocationType.ROUTE]
    assert {loc.name for loc in routes} == {"Pacific Northern Route", "Gulf Coast Corridor"}


def test_find_locations_by_id(repository, seeded):
    target = seeded[0]

    assert repository.find_locations(location_id=target.id) == [target]
    assert repository.find_locations(location_id="missing") == []


def test_samples_round_trip_with_location_name(repository, seeded):
    location = seeded[0]
    reading = make_reading(observed_at=T0, temp_c=None, wind_speed_ms=12.5, condition_label="Rain", source="open-meteo")

    assert repository.save_samples(location.id, [reading]) == 1

    (sample,) = repository.find_samples()
    assert sample.location_id == location.id
    assert sample.location_name == location.name
    assert sample.reading == reading


def test_observed_after_and_ordering(repository, seeded):
    location = seeded[0]
    readings = [make_reading(observed_at=T0 + timedelta(hours=h)) for h in (2, 0, 5, 1)]
    repository.save_samples(location.id, readings)

    recent = repository.find_samples(observed_after=T0 + timedelta(hours=1), order="asc")
    newest_first = repository.find_samples(order="desc")

    assert [s.observed_at for s in recent] == [T0 + timedelta(hours=h) for h in (1, 2, 5)]
    assert newest_first[0].observed_at == T0 + timedelta(hours=5)
    assert newest_first[-1].observed_at == T0


def test_filter_by_location(repository, seeded):
    repository.save_samples(seeded[0].id, [make_reading()])
    repository.save_samples(seeded[1].id, [make_reading(), make_reading()])

    assert len(repository.find_samples(location_id=seeded[1].id)) == 2


def test_unknown_order_is_rejected(repository):
    with pytest.raises(ValueError):
        repository.find_samples(order="sideways")


def test_samples_require_existing_location(repository):
    with pytest.raises(sqlite3.IntegrityError):
        repository.save_samples("ghost", [make_reading()])


def test_fetch_logs_are_recorded(repository, seeded):
    repository.log_fetch(seeded[0].id, True, "Ingested from open-meteo", "open-meteo")
    repository.log_fetch(seeded[0].id, False, "HTTP 500", "ingest")

    with models.session_scope() as session:
        logs = models.fetch_logs(session, seeded[0].id)

    assert [(log["success"], log["message"]) for log in logs] == [(1, "Ingested from open-meteo"), (0, "HTTP 500")]
