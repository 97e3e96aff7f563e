"""
Folder Service.

Business logic for folders: parent validation, cycle prevention and
folder deletion, which sends the folder's notes to the trash.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import ValidationError
from notekeeper.backend.core.utils import utc_now
from notekeeper.backend.models.folder import Folder
from notekeeper.backend.repositories.folder import FolderRepository
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.schemas.folder import FolderCreate, FolderUpdate
from notekeeper.backend.services.base import BaseService
from notekeeper.organizer import entities
from notekeeper.organizer.hierarchy import build_hierarchy
from notekeeper.organizer.mutations import would_create_cycle


class FolderService(BaseService):
    """Service for folder business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = FolderRepository(session)
        self.notes = NoteRepository(session)

    async def list_folders(self) -> list[Folder]:
        return await self.repo.get_all()

    async def get_folder(self, folder_id: int) -> Folder:
        """
        Raises:
            NotFoundError: If folder not found
        """
        return await self.repo.get_by_id(folder_id)

    async def folder_tree(self) -> list[entities.FolderNode]:
        """Folders arranged as a tree, roots first."""
        folders = await self.repo.get_all()
        return build_hierarchy(entities.Folder.model_validate(f) for f in folders)

    async def _check_parent(self, folder_id: int | None, parent_id: int | None) -> None:
        if parent_id is None:
            return
        if not await self.repo.exists(parent_id):
            raise ValidationError(
                "Parent folder does not exist",
                details={"parent_id": parent_id},
            )
        if folder_id is None:
            return
        folders = [entities.Folder.model_validate(f) for f in await self.repo.get_all()]
        if would_create_cycle(folders, folder_id, parent_id):
            raise ValidationError(
                "A folder cannot be moved into itself or one of its subfolders",
                details={"parent_id": parent_id},
            )

    async def create_folder(self, data: FolderCreate) -> Folder:
        """
        Create a folder.

        Raises:
            ValidationError: If the name is blank or the parent does not exist
        """
        self._validate_required(data.model_dump(), ["name"])
        await self._check_parent(None, data.parent_id)

        self._log_operation("Creating folder", name=data.name, parent_id=data.parent_id)
        now = utc_now()
        folder = await self._execute_db_operation(
            "create_folder",
            self.repo.create(
                name=data.name.strip(),
                parent_id=data.parent_id,
                created_at=now,
                updated_at=now,
            ),
        )
        self._log_debug("Folder created", folder_id=folder.id)
        return folder

    async def update_folder(self, folder_id: int, data: FolderUpdate) -> Folder:
        """
        Rename and/or reparent a folder. Omitted fields are kept.

        Raises:
            NotFoundError: If folder not found
            ValidationError: If the new parent is missing or would create a cycle
        """
        update_data = data.model_dump(exclude_unset=True)
        await self.repo.get_by_id(folder_id)

        if "name" in update_data:
            self._validate_required(update_data, ["name"])
            update_data["name"] = update_data["name"].strip()
        if "parent_id" in update_data:
            await self._check_parent(folder_id, update_data["parent_id"])

        self._log_operation(
            "Updating folder",
            folder_id=folder_id,
            fields=list(update_data.keys()),
        )
        update_data["updated_at"] = utc_now()
        return await self._execute_db_operation(
            "update_folder",
            self.repo.update(folder_id, **update_data),
        )

    async def delete_folder(self, folder_id: int) -> int:
        """
        Delete a folder.

        Its notes are moved to the trash with their folder cleared, and its
        direct children move up to its parent.

        Returns:
            Number of notes moved to the trash

        Raises:
            NotFoundError: If folder not found
        """
        folder = await self.repo.get_by_id(folder_id)
        now = utc_now()

        trashed = await self._execute_db_operation(
            "trash_folder_notes",
            self.notes.trash_folder_notes(folder_id, now),
        )
        await self._execute_db_operation(
            "reparent_children",
            self.repo.reparent_children(folder_id, folder.parent_id),
        )
        await self._execute_db_operation("delete_folder", self.repo.delete(folder_id))

        self._log_operation("Folder deleted", folder_id=folder_id, trashed_notes=trashed)
        return trashed
