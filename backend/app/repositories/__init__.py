"""
Repository package for data access layer.
"""
from app.repositories.base import BaseRepository
from app.repositories.category import CategoryRepository
from app.repositories.order import OrderRepository
from app.repositories.product import ProductRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "ProductRepository",
    "OrderRepository",
]
