"""
Base Repository.

Generic id-keyed data access shared by the folder, label and note
repositories. Writes flush but never commit; the request's session
dependency owns the transaction.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    CRUD for one model class.

        class FolderRepository(BaseRepository[Folder]):
            model = Folder

    Lookups that miss raise NotFoundError("<Model> not found").
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _by_id(self, id: int) -> Select:
        return select(self.model).where(self.model.id == id)

    async def get_by_id(self, id: int) -> ModelType:
        """
        Raises:
            NotFoundError: If no row has this id
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def get_by_id_or_none(self, id: int) -> ModelType | None:
        result = await self.session.execute(self._by_id(id))
        return result.scalar_one_or_none()

    async def get_all(self) -> list[ModelType]:
        """Every row, oldest id first."""
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def create(self, **values: Any) -> ModelType:
        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: int, **values: Any) -> ModelType:
        """
        Set the given attributes on an existing row.

        Raises:
            NotFoundError: If no row has this id
        """
        instance = await self.get_by_id(id)
        for key, value in values.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: int) -> None:
        """
        Raises:
            NotFoundError: If no row has this id
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: int) -> bool:
        result = await self.session.execute(select(self.model.id).where(self.model.id == id))
        return result.scalar_one_or_none() is not None
