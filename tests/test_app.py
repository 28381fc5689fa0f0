"""
Application-level behaviour: operational endpoints, error bodies,
request ids and storage failures.
"""
import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from app.core.config import Settings


async def _storage_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection lost"))


class TestOperationalEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "environment": "test"}

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Products API is running"

    def test_docs_disabled_outside_local(self, client):
        assert client.get("/docs").status_code == 404


class TestErrorBodies:

    def test_error_shape(self, client):
        response = client.get("/products/999")
        assert response.json() == {
            "message": "Product not found",
            "success": False,
            "status_code": 404,
        }

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_method_not_allowed(self, client):
        response = client.patch("/products/1")
        assert response.status_code == 405


class TestRequestId:

    def test_request_id_propagated(self, client):
        response = client.get("/products", headers={"X-Request-ID": "req-12345"})
        assert response.headers["X-Request-ID"] == "req-12345"

    def test_request_id_generated(self, client):
        response = client.get("/products")
        assert len(response.headers["X-Request-ID"]) == 36


class TestStorageFailures:
    """Any storage error is surfaced as a 500 with a generic message."""

    @pytest.fixture
    def dao(self, client):
        return client.app.state.product_service.product_dao

    def test_list_failure(self, client, dao, monkeypatch):
        monkeypatch.setattr(dao, "get_multi", _storage_down)
        response = client.get("/products")
        assert response.status_code == 500
        assert response.json()["message"] == "Could not retrieve products"

    def test_get_failure(self, client, dao, monkeypatch):
        monkeypatch.setattr(dao, "get_by_id", _storage_down)
        response = client.get("/products/1")
        assert response.status_code == 500
        assert response.json()["message"] == "Could not retrieve product"

    def test_create_failure(self, client, dao, monkeypatch, auth_headers):
        monkeypatch.setattr(dao, "create", _storage_down)
        response = client.post("/products", json={"name": "Widget", "price": 1.0}, headers=auth_headers())
        assert response.status_code == 500
        assert response.json()["message"] == "Product creation failed"

    def test_update_failure(self, client, dao, monkeypatch, create_product, auth_headers):
        created = create_product(name="Widget")
        monkeypatch.setattr(dao, "update", _storage_down)
        response = client.put(f"/products/{created['id']}", json={"name": "Renamed", "price": 2.0}, headers=auth_headers())
        assert response.status_code == 500
        assert response.json()["message"] == "Product update failed"

    def test_delete_failure(self, client, dao, monkeypatch, create_product, auth_headers):
        created = create_product()
        monkeypatch.setattr(dao, "delete", _storage_down)
        response = client.delete(f"/products/{created['id']}", headers=auth_headers())
        assert response.status_code == 500
        assert response.json()["message"] == "Product deletion failed"


class TestSettings:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db/products")
        monkeypatch.setenv("JWT_SECRET_KEY", "from-env")
        monkeypatch.setenv("ENFORCE_OWNERSHIP", "false")
        settings = Settings()
        assert settings.jwt_secret_key == "from-env"
        assert settings.is_postgres
        assert not settings.is_sqlite
        assert settings.enforce_ownership is False
        assert settings.jwt_algorithm == "HS256"

    def test_secret_is_required(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
