"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Provides a fully mocked AsyncSession with common methods.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
            # Patch the service's repositories and test business rules
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    return session
