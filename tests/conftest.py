"""
Pytest fixtures shared by the test suite.

The FastAPI app is exercised through TestClient without entering its
lifespan, so no MongoDB connection is made. Collections are replaced with
in-memory fakes via dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from api import deps
from api.main import app
from config.settings import settings
from tests.fakes import FakeCollection


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Use the cheapest bcrypt cost factor in tests."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@pytest.fixture
def workouts() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def users() -> FakeCollection:
    return FakeCollection(unique_fields=("email", "username"))


@pytest.fixture
def meals() -> FakeCollection:
    return FakeCollection()


@pytest.fixture
def details() -> FakeCollection:
    return FakeCollection()


# ---------------------------------------------------------------------------
# Test clients
# ---------------------------------------------------------------------------


@pytest.fixture
def anonymous_client(workouts, users, meals, details):
    """TestClient with fake collections and real token authentication."""
    app.dependency_overrides[deps.get_workouts] = lambda: workouts
    app.dependency_overrides[deps.get_users] = lambda: users
    app.dependency_overrides[deps.get_meals] = lambda: meals
    app.dependency_overrides[deps.get_details] = lambda: details
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous_client):
    """TestClient authenticated as TEST_USER_ID."""
    app.dependency_overrides[deps.get_current_user] = mock_get_current_user
    yield anonymous_client
