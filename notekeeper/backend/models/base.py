"""
SQLAlchemy Base Model.

Base class for all database models with common fields.
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from notekeeper.backend.core.utils import utc_now


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class IntegerIdMixin:
    """Mixin that adds an autoincrement integer primary key."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


class CreatedAtMixin:
    """Mixin that adds a created_at timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin that adds created_at and updated_at timestamps.

    updated_at is set by the services, not on every UPDATE: pinning a
    note must leave it alone.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )
