"""Shared fixtures for Shortify tests."""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from shortify.main import app
from shortify.core.config import Settings, get_settings
from shortify.core.database import get_db, get_test_db

TEST_BASE_URL = "http://localhost:8080"


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def test_db():
    """Create a test database instance."""
    db = get_test_db()
    yield db
    db.close()


@pytest.fixture
def test_settings():
    """Settings used by the API under test."""
    return Settings(base_url=TEST_BASE_URL, hashids_salt="test-salt")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(test_db, test_settings):
    """Create a test client backed by the in-memory database."""
    # Set the dependency overrides BEFORE creating TestClient
    # so endpoint requests use the test database
    app.dependency_overrides[get_db] = lambda: test_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    # Skip the default lifespan, which would use the global database
    original_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def test_lifespan(app):
        yield

    app.router.lifespan_context = test_lifespan

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client

    app.router.lifespan_context = original_lifespan
    app.dependency_overrides.clear()
