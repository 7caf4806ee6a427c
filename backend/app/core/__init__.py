"""
Core package containing configuration, database, exceptions, and logging.
"""
from app.core.config import settings
from app.core.database import Base, SessionFactory, get_db_session, get_session_factory
from app.core.exceptions import (
    AggregationError,
    AppError,
    InvalidParameterError,
    InvalidRangeError,
    OrderValidationError,
    ProductNotFoundError,
    ServiceError,
)
from app.core.logging import configure_logging, get_logger

__all__ = [
    "settings",
    "Base",
    "SessionFactory",
    "get_db_session",
    "get_session_factory",
    "configure_logging",
    "get_logger",
    "AppError",
    "AggregationError",
    "InvalidParameterError",
    "InvalidRangeError",
    "OrderValidationError",
    "ProductNotFoundError",
    "ServiceError",
]
