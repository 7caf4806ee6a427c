"""
Order Pydantic schemas for request/response validation.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.order import OrderStatus


class OrderItemCreate(BaseModel):
    """A requested order line; the unit price is looked up server-side."""

    product_id: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    """
    Schema for creating an order.

    `items` is optional at the schema level so that a missing or empty list
    can be reported with the same message by the order service.
    """

    customer_name: Optional[str] = Field(None, max_length=255)
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None
    items: Optional[list[OrderItemCreate]] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status_code(cls, value: Any) -> Any:
        """Status codes arrive as strings ("2") as often as integers."""
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value


class OrderCreateResponse(BaseModel):
    success: bool = True
    message: str = "Order created successfully"
    order_id: int
