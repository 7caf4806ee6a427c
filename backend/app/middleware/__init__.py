"""
Middleware package.
"""
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.middleware.request_context import RequestContextMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RequestContextMiddleware",
]
