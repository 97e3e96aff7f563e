"""
Folder Repository.

Data access layer for folders.
"""

from sqlalchemy import update

from notekeeper.backend.core.utils import utc_now
from notekeeper.backend.models.folder import Folder
from notekeeper.backend.repositories.base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Repository for Folder model."""

    model = Folder

    async def reparent_children(self, parent_id: int, new_parent_id: int | None) -> int:
        """
        Move every direct child of `parent_id` under `new_parent_id`.

        Returns:
            Number of folders moved
        """
        result = await self.session.execute(
            update(Folder)
            .where(Folder.parent_id == parent_id)
            .values(parent_id=new_parent_id, updated_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
