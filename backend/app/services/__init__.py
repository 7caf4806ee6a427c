"""
Services package for business logic layer.
"""
from app.services.dashboard_metrics import DashboardMetrics
from app.services.dashboard_service import DashboardService
from app.services.date_ranges import Period, RangeType
from app.services.order_service import OrderService
from app.services.sorting import SortDirection, SortKey, SortSpec, parse_sort

__all__ = [
    "DashboardMetrics",
    "DashboardService",
    "OrderService",
    "Period",
    "RangeType",
    "SortDirection",
    "SortKey",
    "SortSpec",
    "parse_sort",
]
