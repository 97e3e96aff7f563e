"""
Folder Model.

Database model for folders. A folder optionally nests under another folder.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from notekeeper.backend.models.base import Base, IntegerIdMixin, TimestampMixin


class Folder(IntegerIdMixin, TimestampMixin, Base):
    """Folder database model."""

    __tablename__ = "folders"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name!r}, parent_id={self.parent_id})>"
