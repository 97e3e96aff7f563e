"""
Label Repository.

Data access layer for labels.
"""

from collections.abc import Iterable

from sqlalchemy import delete, select

from notekeeper.backend.models.label import Label
from notekeeper.backend.models.note import note_labels
from notekeeper.backend.repositories.base import BaseRepository


class LabelRepository(BaseRepository[Label]):
    """Repository for Label model."""

    model = Label

    async def get_by_name(self, name: str) -> Label | None:
        result = await self.session.execute(select(Label).where(Label.name == name))
        return result.scalar_one_or_none()

    async def get_many(self, ids: Iterable[int]) -> list[Label]:
        """Labels whose id is in `ids`, in id order."""
        ids = list(ids)
        if not ids:
            return []
        result = await self.session.execute(
            select(Label).where(Label.id.in_(ids)).order_by(Label.id)
        )
        return list(result.scalars().all())

    async def delete(self, id: int) -> None:
        """Delete a label after removing its note associations."""
        instance = await self.get_by_id(id)
        await self.session.execute(delete(note_labels).where(note_labels.c.label_id == id))
        await self.session.delete(instance)
        await self.session.flush()
