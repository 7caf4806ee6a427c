"""
Order repository for data access operations.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.models.order import Order, OrderItem, OrderStatus
from app.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Repository for Order model operations."""

    model = Order

    async def create_header(
        self,
        customer_name: Optional[str],
        status: OrderStatus,
        created_at: datetime,
    ) -> Order:
        """Insert the order row with a zero total and return it with its id."""
        return await self.create(
            {
                "customer_name": customer_name,
                "status": int(status),
                "created_at": created_at,
                "total_amount": Decimal("0"),
            }
        )

    async def add_items(self, order: Order, items: list[OrderItem]) -> None:
        for item in items:
            item.order_id = order.id
        self.session.add_all(items)
        await self.session.flush()

    async def set_total(self, order: Order, total_amount: Decimal) -> Order:
        order.total_amount = total_amount
        await self.session.flush()
        return order
