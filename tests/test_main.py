"""Tests for the Shortify HTTP API."""

import re
from datetime import timedelta
from unittest.mock import MagicMock

from shortify.main import app
from shortify.api.dependencies import get_service
from shortify.core.config import Settings, get_settings
from shortify.core.database import Database
from shortify.core.exceptions import CounterUnavailableError
from shortify.services import ShortenerService
from shortify.utils.clock import utcnow
from shortify.utils.shortener import CounterCodeGenerator, RandomCodeGenerator

TEST_BASE_URL = "http://localhost:8080"


def shorten(client, url="https://example.com/very-long-url", **extra):
    return client.post("/api/shorten", json={"url": url, **extra})


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "mappings": 0}


class TestCreateShortURL:
    """Tests for POST /api/shorten endpoint."""

    def test_create_short_url_success(self, client, test_db):
        """Test creating a short URL successfully."""
        response = shorten(client)
        assert response.status_code == 201
        data = response.json()
        assert len(data["short_code"]) == 5
        assert data["original_url"] == "https://example.com/very-long-url"
        assert re.fullmatch(rf"{TEST_BASE_URL}/[a-zA-Z0-9]{{5}}", data["short_url"])
        assert data["created_at"]
        assert data["expires_at"] is None
        assert test_db.count() == 1

    def test_create_short_url_with_expiry(self, client):
        expires_at = (utcnow() + timedelta(days=7)).isoformat()
        response = shorten(client, expires_at=expires_at)
        assert response.status_code == 201
        assert response.json()["expires_at"] is not None

    def test_blank_url(self, client, test_db):
        response = shorten(client, url="")
        assert response.status_code == 400
        data = response.json()
        assert data["status"] == 400
        assert data["message"] == "Validation failed"
        assert data["timestamp"]
        assert data["errors"]["url"] == "URL cannot be blank"
        assert test_db.count() == 0

    def test_invalid_url_format(self, client):
        response = shorten(client, url="not-a-valid-url")
        assert response.status_code == 400
        assert response.json()["errors"]["url"] == "URL must start with http:// or https://"

    def test_url_too_long(self, client):
        response = shorten(client, url="https://example.com/" + "a" * 250)
        assert response.status_code == 400
        assert response.json()["errors"]["url"] == "URL cannot exceed 255 characters"

    def test_missing_url(self, client):
        response = client.post("/api/shorten", json={})
        assert response.status_code == 400
        assert "url" in response.json()["errors"]

    def test_counter_strategy(self, client, test_db):
        app.dependency_overrides[get_settings] = lambda: Settings(
            base_url=TEST_BASE_URL, code_strategy="counter", hashids_salt="test-salt"
        )
        first = shorten(client).json()
        second = shorten(client).json()
        assert len(first["short_code"]) >= 7
        assert first["short_code"] != second["short_code"]

    def test_assignment_exhausted(self, client):
        """All candidates colliding surfaces as a 500."""
        store = MagicMock(spec=Database)
        store.exists_by_code.return_value = True
        app.dependency_overrides[get_service] = lambda: ShortenerService(
            store, RandomCodeGenerator(5), TEST_BASE_URL
        )

        response = shorten(client)
        assert response.status_code == 500
        assert response.json()["status"] == 500
        store.save.assert_not_called()

    def test_counter_unavailable(self, client, test_db):
        counter = MagicMock()
        counter.increment.side_effect = CounterUnavailableError("down")
        app.dependency_overrides[get_service] = lambda: ShortenerService(
            test_db, CounterCodeGenerator(counter, salt="s"), TEST_BASE_URL
        )

        response = shorten(client)
        assert response.status_code == 503
        assert test_db.count() == 0


class TestRedirectEndpoint:
    """Tests for GET /{short_code} endpoint."""

    def test_redirect_success(self, client):
        """Test successful redirect."""
        short_code = shorten(client).json()["short_code"]

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/very-long-url"

    def test_redirect_not_found(self, client):
        """Test redirect for non-existent short code."""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404
        data = response.json()
        assert data["status"] == 404
        assert data["message"] == "Short URL not found: nonexistent"

    def test_redirect_invalid_code(self, client):
        """Test redirect with invalid short code format."""
        response = client.get("/ab", follow_redirects=False)  # Too short
        assert response.status_code == 404

    def test_redirect_expired(self, client):
        expires_at = (utcnow() - timedelta(minutes=1)).isoformat()
        short_code = shorten(client, expires_at=expires_at).json()["short_code"]

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 410
        data = response.json()
        assert data["status"] == 410
        assert data["message"] == f"Short URL has expired: {short_code}"

    def test_redirect_counts_access(self, client):
        short_code = shorten(client).json()["short_code"]

        for _ in range(3):
            client.get(f"/{short_code}", follow_redirects=False)

        info = client.get(f"/api/urls/{short_code}").json()
        assert info["access_count"] == 3


class TestURLInfoEndpoint:
    """Tests for GET /api/urls/{short_code} endpoint."""

    def test_get_url_info_success(self, client):
        created = shorten(client).json()

        response = client.get(f"/api/urls/{created['short_code']}")
        assert response.status_code == 200
        data = response.json()
        assert data["original_url"] == "https://example.com/very-long-url"
        assert data["short_url"] == created["short_url"]
        assert data["access_count"] == 0
        assert data["is_expired"] is False

    def test_get_url_info_expired(self, client):
        expires_at = (utcnow() - timedelta(days=1)).isoformat()
        short_code = shorten(client, expires_at=expires_at).json()["short_code"]

        response = client.get(f"/api/urls/{short_code}")
        assert response.status_code == 200
        assert response.json()["is_expired"] is True

    def test_get_url_info_not_found(self, client):
        """Test getting info for non-existent URL."""
        response = client.get("/api/urls/nonexistent")
        assert response.status_code == 404


class TestErrorEnvelope:
    """Framework-level errors use the same JSON envelope."""

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/shorten",
            content=b'{"url": ',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Validation failed"
        assert list(data["errors"]) == ["body"]

    def test_unmatched_route(self, client):
        response = client.get("/api/nothing")
        assert response.status_code == 404
        data = response.json()
        assert data["status"] == 404
        assert data["message"] == "Not Found"
        assert data["timestamp"]

    def test_method_not_allowed(self, client):
        response = client.post("/health")
        assert response.status_code == 405
        assert response.json()["status"] == 405
        assert "GET" in response.headers["allow"]


class TestInjectedSettings:
    """Code format checks follow the request's settings."""

    def test_short_codes_within_configured_bounds_resolve(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(
            base_url=TEST_BASE_URL, code_length=2, min_short_code_length=2
        )
        short_code = shorten(client).json()["short_code"]
        assert len(short_code) == 2

        response = client.get(f"/{short_code}", follow_redirects=False)
        assert response.status_code == 302
        assert client.get(f"/api/urls/{short_code}").status_code == 200
