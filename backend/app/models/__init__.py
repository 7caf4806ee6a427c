"""
SQLAlchemy models package.
All models are imported here for easy access and Alembic discovery.
"""
from app.models.category import Category
from app.models.order import Order, OrderItem, OrderStatus
from app.models.product import Product

__all__ = [
    "Category",
    "Product",
    "Order",
    "OrderItem",
    "OrderStatus",
]
