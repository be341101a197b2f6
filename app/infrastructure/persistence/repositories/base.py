"""Base repository: generic get/create/update/delete over an AsyncSession."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Base repository with get_by_id, create, apply_changes and delete.

    Writes flush but never commit; the request's get_db_transactional owns
    the transaction.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def apply_changes(self, obj: ModelType, changes: dict[str, Any]) -> ModelType:
        """Set attributes from changes on an attached record and flush.

        Unknown attribute names raise AttributeError rather than being ignored.
        """
        for attr, value in changes.items():
            if not hasattr(obj, attr):
                raise AttributeError(f"{self.model.__name__} has no attribute {attr!r}")
            setattr(obj, attr, value)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record and flush."""
        await self.db.delete(obj)
        await self.db.flush()
