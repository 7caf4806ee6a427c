"""
Category repository for data access operations.
"""
from typing import Any

from sqlalchemy import select

from app.models.category import Category
from app.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model operations."""

    model = Category

    async def list_summaries(self) -> list[dict[str, Any]]:
        """All categories as `{id, name}`."""
        stmt = select(Category.id, Category.name).order_by(Category.id)
        return await self._all(stmt)
