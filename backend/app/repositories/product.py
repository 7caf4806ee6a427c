"""
Product repository for data access operations.
"""
from collections.abc import Iterable
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import select

from app.models.product import Product
from app.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """Repository for Product model operations."""

    model = Product

    async def list_summaries(self, category_id: Optional[int] = None) -> list[dict[str, Any]]:
        """Products as `{id, name}`, optionally restricted to one category."""
        stmt = select(Product.id, Product.name)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        return await self._all(stmt.order_by(Product.id))

    async def get_prices(self, product_ids: Iterable[int]) -> dict[int, Decimal]:
        """Current prices keyed by product id, in a single query. Unknown ids are absent."""
        ids = set(product_ids)
        if not ids:
            return {}

        stmt = select(Product.id, Product.price).where(Product.id.in_(ids))
        result = await self.session.execute(stmt)
        return {row.id: Decimal(str(row.price)) for row in result.all()}
