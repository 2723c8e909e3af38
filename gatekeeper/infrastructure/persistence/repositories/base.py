"""Base repository: generic get/create/update/delete over one ORM model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity_by_id, create, update and delete.

    Repositories never commit; the caller's unit of work owns the transaction.
    Public read methods of subclasses return DTOs or domain entities.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity_by_id(
        self, entity_id: str, *, for_update: bool = False
    ) -> ModelType | None:
        """Return the ORM row by primary key, optionally locked FOR UPDATE."""
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new row and reload server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached row and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()
