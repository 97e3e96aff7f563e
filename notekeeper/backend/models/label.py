"""
Label Model.

Database model for labels. Label names are unique.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.backend.models.base import Base, CreatedAtMixin, IntegerIdMixin
from notekeeper.organizer.entities import DEFAULT_LABEL_COLOR


class Label(IntegerIdMixin, CreatedAtMixin, Base):
    """Label database model."""

    __tablename__ = "labels"

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )
    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        default=DEFAULT_LABEL_COLOR,
    )

    def __repr__(self) -> str:
        return f"<Label(id={self.id}, name={self.name!r})>"
