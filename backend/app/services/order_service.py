"""
Order service - atomic creation of an order with its items.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import OrderValidationError, ProductNotFoundError, ServiceError
from app.core.logging import get_logger
from app.models.order import OrderItem
from app.repositories.order import OrderRepository
from app.repositories.product import ProductRepository
from app.schemas.order import OrderCreate
from app.services.date_ranges import business_timezone

logger = get_logger(__name__)


def normalize_created_at(value: Optional[datetime]) -> datetime:
    """UTC timestamp for storage. Naive values are read as business-timezone wall time."""
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=business_timezone())
    return value.astimezone(timezone.utc)


class OrderService:
    """
    Creates orders in a single unit of work.

    The header, the items and the recomputed total are committed together;
    any failure, including an unknown product id, rolls back every write made
    by the call.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.orders = OrderRepository(session)
        self.products = ProductRepository(session)

    async def create_order(self, payload: OrderCreate) -> int:
        if not payload.items:
            raise OrderValidationError()

        try:
            order = await self.orders.create_header(
                customer_name=payload.customer_name,
                status=payload.status,
                created_at=normalize_created_at(payload.created_at),
            )
            order_id = order.id

            prices = await self.products.get_prices(item.product_id for item in payload.items)
            missing = sorted({item.product_id for item in payload.items} - prices.keys())
            if missing:
                raise ProductNotFoundError(missing)

            line_items = [
                OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=prices[item.product_id],
                )
                for item in payload.items
            ]
            total_amount = sum(
                (line.price * line.quantity for line in line_items),
                Decimal("0"),
            )

            await self.orders.add_items(order, line_items)
            await self.orders.set_total(order, total_amount)
            await self.session.commit()
        except ProductNotFoundError as e:
            await self.session.rollback()
            logger.warning(
                "Order rejected: unknown product",
                product_ids=e.product_ids,
                customer_name=payload.customer_name,
            )
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to create order",
                customer_name=payload.customer_name,
                items=len(payload.items),
                error=str(e),
            )
            raise ServiceError("Failed to create order", error=str(e)) from e

        logger.info(
            "Order created",
            order_id=order_id,
            items=len(line_items),
            total_amount=str(total_amount),
        )
        return order_id
