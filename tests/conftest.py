# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Environment variables are set before any app import because app.main builds
# its module-level application from the environment.
# =============================================================================

import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import Settings
from app.main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings():
    """Settings backed by a fresh in-memory SQLite database."""
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret_key=TEST_SECRET,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def client(settings):
    """Test client with the application lifespan (table creation) running."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def make_token():
    """Build a signed token; every part can be overridden per test."""

    def _make_token(user_id=1, secret=TEST_SECRET, expires_delta=timedelta(minutes=5), claims=None):
        payload = {"user_id": user_id}
        if expires_delta is not None:
            payload["exp"] = datetime.now(timezone.utc) + expires_delta
        payload.update(claims or {})
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make_token


@pytest.fixture
def auth_headers(make_token):
    """Authorization header for the given user id."""

    def _auth_headers(user_id=1):
        return {"Authorization": f"Bearer {make_token(user_id=user_id)}"}

    return _auth_headers


@pytest.fixture
def create_product(client, auth_headers):
    """Create a product through the API and return its JSON body."""

    def _create_product(name="Widget", price=9.99, user_id=1, **extra):
        body = {"name": name, "price": price, **extra}
        response = client.post("/products", json=body, headers=auth_headers(user_id))
        assert response.status_code == 201, response.text
        return response.json()

    return _create_product
