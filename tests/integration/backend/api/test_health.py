"""
Integration Tests for Health Endpoints.
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient


class TestHealthEndpoints:
    """Tests for /health and /health/ready."""

    @pytest.mark.asyncio
    async def test_liveness_always_healthy(self, client: AsyncClient):
        """GET /health should always return 200."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_readiness_healthy(self, client: AsyncClient):
        """Should report healthy when the database answers."""
        with patch(
            "notekeeper.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["latency_ms"] == 1

    @pytest.mark.asyncio
    async def test_readiness_unhealthy(self, client: AsyncClient):
        """Should answer 503 when the database check fails."""
        with patch(
            "notekeeper.backend.api.health.check_database",
            AsyncMock(return_value={"status": "unhealthy", "error": "down"}),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["detail"]["status"] == "unhealthy"
