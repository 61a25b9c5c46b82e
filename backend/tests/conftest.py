"""Shared fixtures for RideCompare tests."""

import os
import random
import tempfile

# Configure a throwaway datastore and the mock Uber path before the app loads
test_db = tempfile.NamedTemporaryFile(suffix='.db', delete=False)
os.environ["DATABASE_URL"] = f"sqlite:///{test_db.name}"
os.environ["UBER_SERVER_TOKEN"] = ""
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.endpoints import get_comparator
from app.services.estimators import build_estimators
from app.services.ride_comparator import RideComparator


class FixedRandom(random.Random):
    """Random source whose uniform draws always return the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def no_surge_rng():
    # 0.5 stays under every provider's surge threshold
    return FixedRandom(0.5)


@pytest.fixture
def surge_rng():
    # 0.9 exceeds every provider's surge threshold
    return FixedRandom(0.9)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seeded_client(no_surge_rng):
    """Client whose comparator uses mock estimators with no surge."""
    comparator = RideComparator(build_estimators(rng=no_surge_rng))
    app.dependency_overrides[get_comparator] = lambda: comparator
    yield TestClient(app)
    app.dependency_overrides.clear()
