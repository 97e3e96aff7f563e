"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.database import get_db_session

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]
