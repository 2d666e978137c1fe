from __future__ import annotations

import pytest

from backend.core import models
from backend.core.seed import seed_locations


@pytest.fixture()
def repository(tmp_path) -> models.SampleRepository:
    models.configure_engine(f"sqlite:///{tmp_path / 'test.db'}")
    return models.SampleRepository(models.get_session_factory())


@pytest.fixture()
def seeded(repository):
    return seed_locations(models.get_session_factory())
