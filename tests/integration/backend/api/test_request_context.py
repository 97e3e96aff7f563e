"""
Integration Tests for Request Context Middleware.

Tests that request context is properly propagated through the API.
"""

import pytest
from httpx import AsyncClient


class TestRequestIdHeader:
    """Tests for X-Request-ID header handling."""

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client: AsyncClient):
        """Should generate X-Request-ID when not provided."""
        response = await client.get("/health")

        assert response.status_code == 200
        # UUID format: 8-4-4-4-12 = 36 characters
        assert len(response.headers["X-Request-ID"]) == 36

    @pytest.mark.asyncio
    async def test_propagates_provided_request_id(self, client: AsyncClient):
        """Should use provided X-Request-ID header."""
        response = await client.get("/api/folders", headers={"X-Request-ID": "my-request-12345"})

        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "my-request-12345"


class TestResponseTimeHeader:
    """Tests for X-Response-Time header."""

    @pytest.mark.asyncio
    async def test_includes_response_time(self, client: AsyncClient):
        response = await client.get("/api/labels")

        assert response.headers["X-Response-Time"].removesuffix("ms").isdigit()

    @pytest.mark.asyncio
    async def test_response_time_on_error(self, client: AsyncClient):
        """Should include response time even on error responses."""
        response = await client.get("/api/notes/9999")

        assert response.status_code == 404
        assert "X-Response-Time" in response.headers


class TestRequestContextInErrors:
    """Tests for request context in error responses."""

    @pytest.mark.asyncio
    async def test_error_response_includes_request_id(self, client: AsyncClient):
        """Should include request_id in error response metadata."""
        response = await client.get(
            "/api/notes/9999",
            headers={"X-Request-ID": "error-test-request-id"},
        )

        assert response.status_code == 404
        assert response.json()["metadata"]["request_id"] == "error-test-request-id"

    @pytest.mark.asyncio
    async def test_validation_error_includes_request_id(self, client: AsyncClient, api):
        """Should include request_id in validation error response metadata."""
        response = await client.post(
            "/api/notes",
            json={},
            headers={"X-Request-ID": "validation-error-request-id"},
        )

        data = api.assert_validation_error(response, "title")
        assert data["metadata"]["request_id"] == "validation-error-request-id"

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_rejected(self, client: AsyncClient, api):
        """Should answer a malformed path id with 400."""
        response = await client.get("/api/notes/not-a-number")

        api.assert_validation_error(response, "note_id")
