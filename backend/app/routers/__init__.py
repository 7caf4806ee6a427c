"""
API routers package.
"""
from app.routers.categories import router as categories_router
from app.routers.dashboard import router as dashboard_router
from app.routers.health import router as health_router
from app.routers.orders import router as orders_router
from app.routers.products import router as products_router

__all__ = [
    "health_router",
    "categories_router",
    "products_router",
    "orders_router",
    "dashboard_router",
]
