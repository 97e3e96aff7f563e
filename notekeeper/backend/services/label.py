"""
Label Service.

Business logic for labels. Label names are unique.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import ConflictError
from notekeeper.backend.core.utils import utc_now
from notekeeper.backend.models.label import Label
from notekeeper.backend.repositories.label import LabelRepository
from notekeeper.backend.schemas.label import LabelCreate, LabelUpdate
from notekeeper.backend.services.base import BaseService

DUPLICATE_NAME_MESSAGE = "Label name already exists"


class LabelService(BaseService):
    """Service for label business logic."""

    conflict_message = DUPLICATE_NAME_MESSAGE

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = LabelRepository(session)

    async def _check_unique(self, name: str, label_id: int | None = None) -> None:
        existing = await self.repo.get_by_name(name)
        if existing is not None and existing.id != label_id:
            raise ConflictError(DUPLICATE_NAME_MESSAGE)

    async def list_labels(self) -> list[Label]:
        return await self.repo.get_all()

    async def get_label(self, label_id: int) -> Label:
        return await self.repo.get_by_id(label_id)

    async def create_label(self, data: LabelCreate) -> Label:
        """
        Create a label.

        Raises:
            ValidationError: If the name is blank
            ConflictError: If the name is taken
        """
        self._validate_required(data.model_dump(), ["name"])
        name = data.name.strip()
        await self._check_unique(name)

        self._log_operation("Creating label", name=name)
        return await self._execute_db_operation(
            "create_label",
            self.repo.create(name=name, color=data.color, created_at=utc_now()),
        )

    async def update_label(self, label_id: int, data: LabelUpdate) -> Label:
        """
        Rename or recolor a label.

        Raises:
            NotFoundError: If label not found
            ConflictError: If the new name is taken
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        await self.repo.get_by_id(label_id)

        if "name" in update_data:
            self._validate_required(update_data, ["name"])
            update_data["name"] = update_data["name"].strip()
            await self._check_unique(update_data["name"], label_id)

        self._log_operation("Updating label", label_id=label_id, fields=list(update_data.keys()))
        return await self._execute_db_operation(
            "update_label",
            self.repo.update(label_id, **update_data),
        )

    async def delete_label(self, label_id: int) -> None:
        """Delete a label and its note associations. Notes are otherwise untouched."""
        self._log_operation("Deleting label", label_id=label_id)
        await self._execute_db_operation("delete_label", self.repo.delete(label_id))
