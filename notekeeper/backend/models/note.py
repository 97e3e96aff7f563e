"""
Note Model.

Database model for notes and the note_labels association table.
"""

from sqlalchemy import Column, Enum, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notekeeper.backend.models.base import Base, IntegerIdMixin, TimestampMixin
from notekeeper.backend.models.label import Label
from notekeeper.organizer.entities import NoteStatus

note_labels = Table(
    "note_labels",
    Base.metadata,
    Column("note_id", ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("label_id", ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True),
)


class Note(IntegerIdMixin, TimestampMixin, Base):
    """
    Note database model.

    Lifecycle is a single status column; pinning is a separate flag.
    Labels are loaded eagerly so responses can embed them.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    folder_id: Mapped[int | None] = mapped_column(
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[NoteStatus] = mapped_column(
        Enum(
            NoteStatus,
            native_enum=False,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=NoteStatus.ACTIVE,
        index=True,
    )
    is_pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )

    labels: Mapped[list[Label]] = relationship(
        secondary=note_labels,
        lazy="selectin",
        order_by=Label.id,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, status={self.status.value})>"
