"""
Pydantic schemas package.
"""
from app.schemas.catalog import (
    CategoryListResponse,
    CategorySummary,
    ProductListResponse,
    ProductSummary,
)
from app.schemas.dashboard import (
    BarChartEntry,
    DashboardData,
    DashboardResponse,
    LineChartPoint,
    PeriodComparison,
    PieChartSlice,
    SummaryTotal,
    TopProduct,
    TopProductsResponse,
)
from app.schemas.order import OrderCreate, OrderCreateResponse, OrderItemCreate

__all__ = [
    # Catalog
    "CategorySummary",
    "CategoryListResponse",
    "ProductSummary",
    "ProductListResponse",
    # Order
    "OrderCreate",
    "OrderItemCreate",
    "OrderCreateResponse",
    # Dashboard
    "PeriodComparison",
    "SummaryTotal",
    "LineChartPoint",
    "PieChartSlice",
    "BarChartEntry",
    "DashboardData",
    "DashboardResponse",
    "TopProduct",
    "TopProductsResponse",
]
