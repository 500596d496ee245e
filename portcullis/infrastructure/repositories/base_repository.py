"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portcullis.domain.repositories.base import BaseRepository
from portcullis.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: AsyncSession, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _select(self):
        """Base SELECT; subclasses attach eager-load options."""
        return select(self.model)

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        result = await self.db.execute(
            self._select().where(self.model.id == id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        result = await self.db.execute(
            self._select().order_by(self.model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def add(self, db_obj: ModelType) -> ModelType:
        db_obj.touch_created()
        self.db.add(db_obj)
        await self.db.flush()
        return db_obj

    async def save(self, db_obj: ModelType) -> ModelType:
        db_obj.touch_updated()
        await self.db.flush()
        return db_obj

    async def delete(self, db_obj: ModelType) -> None:
        await self.db.delete(db_obj)
        await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    async def _exists(self, stmt: Any) -> bool:
        result = await self.db.execute(stmt.limit(1))
        return result.first() is not None
