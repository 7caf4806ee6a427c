"""
Base repository with common data access operations.
Implements the Repository pattern for data access abstraction.
"""
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing common database operations.

    Subclasses should set the `model` class attribute to the SQLAlchemy model.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, obj_in: dict[str, Any]) -> ModelType:
        """Stage a new record and flush it so its primary key is assigned."""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.flush()
        return db_obj

    async def count(self) -> int:
        """Count total records."""
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def _all(self, stmt: Select) -> list[dict[str, Any]]:
        result = await self.session.execute(stmt)
        return [dict(row._mapping) for row in result.all()]
