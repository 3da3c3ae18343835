"""Integration tests for health check endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_healthy_status(self, client: TestClient) -> None:
        """Test that /health returns 200 with status, timestamp and version."""
        response = client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["timestamp"] is not None
        assert data["version"] == "0.1.0"


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    def test_readiness_returns_200_when_database_answers(self, client: TestClient) -> None:
        """Test that /health/ready is healthy when Supabase responds."""
        response = client.get("/health/ready")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert [check["name"] for check in data["checks"]] == ["database"]
        assert data["checks"][0]["healthy"] is True

    def test_readiness_returns_503_when_database_fails(
        self, client: TestClient, mock_supabase_client: MagicMock
    ) -> None:
        """Test that /health/ready reports 503 with the error when Supabase is down."""
        mock_supabase_client.table.side_effect = ConnectionError("connection refused")

        response = client.get("/health/ready")
        data = response.json()

        assert response.status_code == 503
        assert data["status"] == "unhealthy"
        assert "connection refused" in data["checks"][0]["error"]
