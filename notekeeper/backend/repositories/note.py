"""
Note Repository.

Data access layer for notes and their label associations.
Queries load labels eagerly and refresh already loaded instances,
since association rows are changed outside the ORM collections.
Deleting a note goes through the ORM, which removes the association
rows before the note row.
"""

from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import selectinload

from notekeeper.backend.models.note import Note, note_labels
from notekeeper.backend.repositories.base import BaseRepository
from notekeeper.organizer.entities import NoteStatus


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds association and status queries.
    """

    model = Note

    def _select(self) -> Any:
        return (
            select(Note)
            .options(selectinload(Note.labels))
            .execution_options(populate_existing=True)
        )

    async def get_by_id_or_none(self, id: int) -> Note | None:
        result = await self.session.execute(self._select().where(Note.id == id))
        return result.scalar_one_or_none()

    async def get_all(self) -> list[Note]:
        result = await self.session.execute(self._select().order_by(Note.id))
        return list(result.scalars().all())

    async def trash_folder_notes(self, folder_id: int, now: Any) -> int:
        """
        Move every note in `folder_id` to the trash and clear its folder.

        Returns:
            Number of notes trashed
        """
        result = await self.session.execute(
            update(Note)
            .where(Note.folder_id == folder_id)
            .values(status=NoteStatus.TRASHED, folder_id=None, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def get_label_ids(self, note_id: int) -> set[int]:
        result = await self.session.execute(
            select(note_labels.c.label_id).where(note_labels.c.note_id == note_id)
        )
        return set(result.scalars().all())

    async def has_label(self, note_id: int, label_id: int) -> bool:
        result = await self.session.execute(
            select(note_labels.c.note_id).where(
                note_labels.c.note_id == note_id,
                note_labels.c.label_id == label_id,
            )
        )
        return result.first() is not None

    async def add_label(self, note_id: int, label_id: int) -> bool:
        """
        Associate a label with a note.

        Returns:
            False when the association already existed
        """
        if await self.has_label(note_id, label_id):
            return False
        await self.session.execute(
            insert(note_labels).values(note_id=note_id, label_id=label_id)
        )
        return True

    async def remove_label(self, note_id: int, label_id: int) -> bool:
        """
        Remove a note-label association.

        Returns:
            False when there was nothing to remove
        """
        result = await self.session.execute(
            delete(note_labels).where(
                note_labels.c.note_id == note_id,
                note_labels.c.label_id == label_id,
            )
        )
        return result.rowcount > 0

    async def set_labels(self, note_id: int, label_ids: set[int]) -> None:
        """Reconcile associations: add the missing ones and drop the rest."""
        current = await self.get_label_ids(note_id)
        stale = current - label_ids
        if stale:
            await self.session.execute(
                delete(note_labels).where(
                    note_labels.c.note_id == note_id,
                    note_labels.c.label_id.in_(stale),
                )
            )
        for label_id in sorted(label_ids - current):
            await self.session.execute(
                insert(note_labels).values(note_id=note_id, label_id=label_id)
            )

