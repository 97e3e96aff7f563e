"""
Base Service.

Shared plumbing for the folder, label and note services: the request's
session, a module logger, translation of SQLAlchemy failures into
application errors, and the blank-field check used on create and rename.

Usage:
    class LabelService(BaseService):
        conflict_message = "Label name already exists"

        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = LabelRepository(session)

        async def delete_label(self, label_id: int) -> None:
            await self._execute_db_operation("delete_label", self.repo.delete(label_id))
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from notekeeper.backend.core.logging import get_logger

T = TypeVar("T")

_UNIQUE_MARKERS = ("unique", "duplicate")


class BaseService:
    """
    Base class for services.

    Subclasses create their repositories in __init__ and may override
    `conflict_message`, the text reported when a unique constraint fails.
    """

    conflict_message = "Resource already exists"

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    def _translate_integrity_error(self, operation: str, error: IntegrityError) -> ApplicationError:
        reason = str(error).lower()
        if any(marker in reason for marker in _UNIQUE_MARKERS):
            return ConflictError(self.conflict_message)
        return DatabaseError(f"Database constraint violation: {operation}")

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a repository call, converting database failures.

        Raises:
            ConflictError: A unique constraint failed
            DatabaseError: Any other SQLAlchemy error
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            raise self._translate_integrity_error(operation, e) from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _validate_required(self, fields: dict[str, Any], field_names: list[str]) -> None:
        """
        Reject None or whitespace-only values for `field_names`.

        Raises:
            ValidationError: With every offending name in details["missing_fields"]
        """
        missing = [
            name for name in field_names
            if fields.get(name) is None
            or (isinstance(fields[name], str) and not fields[name].strip())
        ]
        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(operation, extra={"service": self.__class__.__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": self.__class__.__name__, **context})
