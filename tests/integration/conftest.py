"""
Integration Test Fixtures.

Fixtures for integration tests - uses real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.database import get_db_session
from notekeeper.backend.main import create_app


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def test_app(db_session: AsyncSession) -> FastAPI:
    """
    Create the application with the database session overridden.

    Every request in a test shares `db_session`, which is rolled back
    after the test.
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the application in-process.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# Envelope Assertions
# =============================================================================


class ApiAssertions:
    """Checks on the {success, data, error, metadata} envelope."""

    @staticmethod
    def _status(response: Any, expected: int) -> dict[str, Any]:
        assert response.status_code == expected, (
            f"Expected status {expected}, got {response.status_code}: {response.text}"
        )
        return response.json()

    @classmethod
    def assert_success(cls, response: Any, expected_status: int = 200) -> dict[str, Any]:
        """Assert a success envelope and return the parsed body."""
        data = cls._status(response, expected_status)
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @classmethod
    def assert_error(
        cls,
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """Assert an error envelope, optionally with a specific error code."""
        data = cls._status(response, expected_status)
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"
        if expected_code:
            assert data["error"].get("code") == expected_code, (
                f"Expected error code {expected_code}, got {data['error'].get('code')}"
            )
        return data

    @classmethod
    def assert_validation_error(cls, response: Any, field: str | None = None) -> dict[str, Any]:
        """Assert a 400 VAL_REQUEST_INVALID, optionally naming `field` among the failures."""
        data = cls.assert_error(response, 400, "VAL_REQUEST_INVALID")
        if field:
            errors = (data["error"].get("details") or {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', got errors for: {fields}"
            )
        return data


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
