"""
Order API routes.
"""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.schemas.order import OrderCreate, OrderCreateResponse
from app.services.order_service import OrderService

router = APIRouter(prefix="/order", tags=["orders"])


async def get_order_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> OrderService:
    """Dependency to get order service."""
    return OrderService(session)


@router.post("", response_model=OrderCreateResponse)
async def create_order(
    order_data: OrderCreate,
    service: Annotated[OrderService, Depends(get_order_service)],
) -> OrderCreateResponse:
    """
    Create an order with its items.

    Unit prices are taken from the current product prices and the order total
    is computed server-side.
    """
    order_id = await service.create_order(order_data)
    return OrderCreateResponse(order_id=order_id)
