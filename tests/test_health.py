"""Integration tests for health check endpoints."""

from unittest.mock import AsyncMock

from httpx import AsyncClient

from product_finder import __version__
from product_finder.exceptions import SearchError


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    async def test_health_returns_status(self, client: AsyncClient) -> None:
        """Health endpoint returns healthy status and version."""
        response = await client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["version"] == __version__

    async def test_health_returns_timestamp(self, client: AsyncClient) -> None:
        """Health endpoint returns ISO timestamp."""
        response = await client.get("/health")
        assert "T" in response.json()["timestamp"]


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    async def test_ready_when_collection_exists(self, client: AsyncClient) -> None:
        """Readiness is ok when the product collection is reachable."""
        response = await client.get("/health/ready")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "ready"
        assert data["checks"] == {"config": "ok", "vector_store": "ok"}
        assert "timestamp" in data

    async def test_not_ready_when_collection_missing(
        self, client: AsyncClient, vector_store: AsyncMock
    ) -> None:
        """A missing collection makes the service not ready."""
        vector_store.collection_exists.return_value = False

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["vector_store"] == "collection_missing"

    async def test_not_ready_when_vector_store_down(
        self, client: AsyncClient, vector_store: AsyncMock
    ) -> None:
        """An unreachable vector store makes the service not ready."""
        vector_store.collection_exists.side_effect = SearchError("refused")

        response = await client.get("/health/ready")
        data = response.json()

        assert response.status_code == 503
        assert data["status"] == "not_ready"
        assert data["checks"]["vector_store"] == "unavailable"


class TestLivenessEndpoint:
    """Tests for /health/live endpoint."""

    async def test_liveness_returns_alive(self, client: AsyncClient) -> None:
        """Liveness endpoint returns alive status."""
        response = await client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"
