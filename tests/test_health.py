"""Tests for the health check endpoint."""

from fastapi.testclient import TestClient

from main import app


class TestHealthCheck:
    def test_health_check_returns_success(self) -> None:
        client = TestClient(app)
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["status"] == "healthy"
        assert "Recipe Catalog" in data["data"]["message"]
        assert data["message"] == "Health check successful"

    def test_health_check_sets_correlation_header(self) -> None:
        client = TestClient(app)
        response = client.get("/health")

        assert response.headers["X-Correlation-ID"]
