"""
Dashboard service - composes periods, labels and metrics into API payloads.
"""
from typing import Optional

from app.core.logging import get_logger
from app.schemas.dashboard import DashboardData, TopProduct
from app.services.dashboard_metrics import DashboardMetrics, gather_or_cancel
from app.services.date_ranges import RangeType, generate_chart_labels, get_date_range
from app.services.excel_export import build_top_products_workbook
from app.services.sorting import parse_sort

logger = get_logger(__name__)

DEFAULT_RANGE = RangeType.LAST_7_DAYS


def resolve_range(range_value: Optional[str]) -> RangeType:
    """Absent or empty selectors mean the last 7 days; anything else must be valid."""
    if not range_value:
        return DEFAULT_RANGE
    return RangeType.parse(range_value)


class DashboardService:
    """Entry points behind the dashboard endpoints."""

    def __init__(self, metrics: DashboardMetrics) -> None:
        self.metrics = metrics

    async def get_dashboard(self, range_value: Optional[str] = None) -> DashboardData:
        """Summary plus line, pie and bar chart feeds for one range."""
        range_type = resolve_range(range_value)
        period = get_date_range(range_type)
        labels = generate_chart_labels(period, range_type)

        summary_total, line_chart_data, pie_chart_data, bar_chart_data = await gather_or_cancel(
            self.metrics.fetch_summary_total(period, range_type),
            self.metrics.fetch_line_chart_data(period, range_type, labels),
            self.metrics.fetch_pie_chart_data(period),
            self.metrics.fetch_bar_chart_data(period),
        )

        logger.info(
            "Dashboard computed",
            range=range_type.value,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
            total_orders=summary_total.total_orders,
        )

        return DashboardData(
            summary_total=summary_total,
            line_chart_data=line_chart_data,
            pie_chart_data=pie_chart_data,
            bar_chart_data=bar_chart_data,
        )

    async def get_top_products(
        self,
        range_value: Optional[str] = None,
        sort_value: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> list[TopProduct]:
        range_type = resolve_range(range_value)
        period = get_date_range(range_type)
        sort = parse_sort(sort_value)

        return await self.metrics.fetch_top_products(period, sort, category_id)

    async def export_top_products(
        self,
        range_value: Optional[str] = None,
        sort_value: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> Optional[bytes]:
        """Top products as an .xlsx buffer, or None when there is nothing to export."""
        products = await self.get_top_products(range_value, sort_value, category_id)
        if not products:
            return None

        buffer = build_top_products_workbook(products)
        logger.info("Top products exported", rows=len(products), size=len(buffer))
        return buffer
