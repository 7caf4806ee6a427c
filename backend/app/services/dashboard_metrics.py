"""
Dashboard metrics - aggregate queries over orders and order items.

Each query runs in its own session taken from the session factory, so the
independent reads behind one dashboard request can be awaited concurrently.
Any database failure is logged and re-raised as AggregationError; callers
never receive partial results.
"""
import asyncio
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Awaitable, Optional, Union

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.core.exceptions import AggregationError
from app.core.logging import get_logger
from app.models import Category, Order, OrderItem, OrderStatus, Product
from app.schemas.dashboard import (
    BarChartEntry,
    LineChartPoint,
    PeriodComparison,
    PieChartSlice,
    SummaryTotal,
    TopProduct,
)
from app.services.chart_buckets import local_bucket
from app.services.date_ranges import (
    Period,
    RangeType,
    bucket_label,
    calc_percent_change,
    get_previous_period,
)
from app.services.sorting import SortSpec

logger = get_logger(__name__)


def round_half_up(value: Union[float, Decimal]) -> int:
    """Round to the nearest integer with halves going up."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def fulfillment_rate(total_orders: int, completed_orders: int) -> float:
    """Completed orders as a percentage of all orders, 0 when there are none."""
    if total_orders == 0:
        return 0.0
    return round(completed_orders / total_orders * 100, 2)


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """
    Await everything concurrently, like `asyncio.gather`.

    When one awaitable fails the others are cancelled and awaited before the
    error propagates, so no query keeps a session open after the request has
    failed.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


@dataclass(frozen=True)
class SummaryValues:
    total_sales: int
    total_orders: int
    total_revenue: float
    fulfillment_rate: float


def compare_summaries(current: SummaryValues, previous: SummaryValues) -> PeriodComparison:
    """Apply the shared percent-change rule to every summary metric."""
    return PeriodComparison(
        sales_change=calc_percent_change(current.total_sales, previous.total_sales),
        orders_change=calc_percent_change(current.total_orders, previous.total_orders),
        revenue_change=calc_percent_change(current.total_revenue, previous.total_revenue),
        fulfillment_rate_change=calc_percent_change(
            current.fulfillment_rate, previous.fulfillment_rate
        ),
    )


class DashboardMetrics:
    """Aggregations backing the dashboard charts, summary and rankings."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    async def _fetch(
        self,
        operation: str,
        stmt: Select,
        period: Period,
        *,
        scalar: bool = False,
        **context: Any,
    ) -> Any:
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar() if scalar else result.all()
        except SQLAlchemyError as e:
            logger.error(
                "Dashboard aggregation failed",
                operation=operation,
                start=period.start.isoformat(),
                end=period.end.isoformat(),
                error=str(e),
                **context,
            )
            raise AggregationError(operation) from e

    @staticmethod
    def _in_period(period: Period):
        start, end = period.utc_bounds()
        return Order.created_at.between(start, end)

    @staticmethod
    def _completed():
        return Order.status == int(OrderStatus.COMPLETED)

    # ------------------------------------------------------------------
    # Summary metrics
    # ------------------------------------------------------------------

    async def count_total_sales(self, period: Period) -> int:
        """Units sold across completed orders."""
        stmt = (
            select(func.sum(OrderItem.quantity))
            .select_from(OrderItem)
            .join(Order, OrderItem.order_id == Order.id)
            .where(self._completed(), self._in_period(period))
        )
        value = await self._fetch("count_total_sales", stmt, period, scalar=True)
        return int(value or 0)

    async def count_total_orders(self, period: Period) -> int:
        """Orders placed in the period, whatever their status."""
        stmt = select(func.count(Order.id)).where(self._in_period(period))
        value = await self._fetch("count_total_orders", stmt, period, scalar=True)
        return int(value or 0)

    async def count_completed_orders(self, period: Period) -> int:
        stmt = select(func.count(Order.id)).where(self._completed(), self._in_period(period))
        value = await self._fetch("count_completed_orders", stmt, period, scalar=True)
        return int(value or 0)

    async def calculate_total_revenue(self, period: Period) -> float:
        """Sum of completed orders' totals."""
        stmt = select(func.sum(Order.total_amount)).where(self._completed(), self._in_period(period))
        value = await self._fetch("calculate_total_revenue", stmt, period, scalar=True)
        return round(float(value or 0), 2)

    async def calculate_fulfillment_rate(self, period: Period) -> float:
        """Completed orders as a percentage of all orders, 0 when there are none."""
        total_orders, completed_orders = await gather_or_cancel(
            self.count_total_orders(period),
            self.count_completed_orders(period),
        )
        return fulfillment_rate(total_orders, completed_orders)

    async def collect_summary(self, period: Period) -> SummaryValues:
        total_sales, total_orders, completed_orders, total_revenue = await gather_or_cancel(
            self.count_total_sales(period),
            self.count_total_orders(period),
            self.count_completed_orders(period),
            self.calculate_total_revenue(period),
        )
        return SummaryValues(
            total_sales=total_sales,
            total_orders=total_orders,
            total_revenue=total_revenue,
            fulfillment_rate=fulfillment_rate(total_orders, completed_orders),
        )

    async def compare_with_previous_period(
        self,
        range_type: RangeType,
        period: Period,
    ) -> tuple[SummaryValues, PeriodComparison]:
        """
        Summary of the period and the percent change of every metric against
        the previous period. Both summaries are collected concurrently.
        """
        current, previous = await gather_or_cancel(
            self.collect_summary(period),
            self.collect_summary(get_previous_period(range_type, period)),
        )
        return current, compare_summaries(current, previous)

    async def fetch_summary_total(self, period: Period, range_type: RangeType) -> SummaryTotal:
        """Summary metrics of the period, compared with the previous period."""
        current, comparisons = await self.compare_with_previous_period(range_type, period)

        return SummaryTotal(
            total_sales=current.total_sales,
            total_orders=current.total_orders,
            total_revenue=current.total_revenue,
            fulfillment_rate=current.fulfillment_rate,
            comparisons=comparisons,
        )

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    async def fetch_line_chart_data(
        self,
        period: Period,
        range_type: RangeType,
        labels: list[str],
    ) -> list[LineChartPoint]:
        """
        Total and average completed-order revenue per bucket.

        Orders are grouped in the database on their business-timezone date (or
        month) so the keys match the chart labels exactly; labels without
        orders report zeros.
        """
        completed = (
            select(
                local_bucket(
                    Order.created_at,
                    range_type,
                    settings.business_timezone,
                    period.end,
                ).label("bucket"),
                Order.total_amount,
            )
            .where(self._completed(), self._in_period(period))
            .subquery()
        )
        stmt = (
            select(
                completed.c.bucket,
                func.sum(completed.c.total_amount).label("total"),
                func.count().label("order_count"),
            )
            .group_by(completed.c.bucket)
            .order_by(completed.c.bucket)
        )
        rows = await self._fetch("fetch_line_chart_data", stmt, period, range=range_type.value)

        buckets = {bucket_label(row.bucket, range_type): row for row in rows}

        points = []
        for label in labels:
            row = buckets.get(label)
            if row is None or not row.order_count:
                points.append(LineChartPoint(label=label, total=0, avg=0))
                continue
            total = float(row.total or 0)
            points.append(
                LineChartPoint(
                    label=label,
                    total=round_half_up(total),
                    avg=round_half_up(total / row.order_count),
                )
            )
        return points

    async def fetch_pie_chart_data(self, period: Period) -> list[PieChartSlice]:
        """Share of orders per status. Counts every status, not only completed."""
        stmt = (
            select(Order.status, func.count(Order.id).label("order_count"))
            .where(self._in_period(period))
            .group_by(Order.status)
            .order_by(Order.status)
        )
        rows = await self._fetch("fetch_pie_chart_data", stmt, period)

        total = sum(row.order_count for row in rows)
        return [
            PieChartSlice(
                label=str(row.status),
                value=0.0 if total == 0 else round(row.order_count / total * 100, 2),
            )
            for row in rows
        ]

    async def fetch_bar_chart_data(self, period: Period) -> list[BarChartEntry]:
        """Completed-order revenue per category, highest first."""
        total_revenue = func.sum(OrderItem.price * OrderItem.quantity).label("total_revenue")
        stmt = (
            select(Category.name.label("label"), total_revenue)
            .select_from(OrderItem)
            .join(Order, OrderItem.order_id == Order.id)
            .join(Product, OrderItem.product_id == Product.id)
            .join(Category, Product.category_id == Category.id)
            .where(self._completed(), self._in_period(period))
            .group_by(Category.name)
            .order_by(total_revenue.desc(), Category.name)
        )
        rows = await self._fetch("fetch_bar_chart_data", stmt, period)

        return [
            BarChartEntry(label=row.label, total=round(float(row.total_revenue or 0), 2))
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    async def fetch_top_products(
        self,
        period: Period,
        sort: SortSpec,
        category_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[TopProduct]:
        """
        Best selling products of the period.

        Rows are ordered by the requested column and direction, then by product
        id so equal values always come back in the same order.
        """
        limit = limit or settings.top_products_limit

        product_name = Product.name.label("product_name")
        price = Product.price.label("price")
        category_name = Category.name.label("category_name")
        total_quantity = func.sum(OrderItem.quantity).label("total_quantity")
        total_amount = func.sum(OrderItem.quantity * OrderItem.price).label("total_amount")
        columns = {
            column.name: column
            for column in (product_name, price, category_name, total_quantity, total_amount)
        }
        order_column = columns[sort.sort_key]

        stmt = (
            select(product_name, price, category_name, total_quantity, total_amount)
            .select_from(OrderItem)
            .join(Order, OrderItem.order_id == Order.id)
            .join(Product, OrderItem.product_id == Product.id)
            .join(Category, Product.category_id == Category.id)
            .where(self._completed(), self._in_period(period))
        )
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)

        stmt = (
            stmt.group_by(Product.id, Product.name, Product.price, Category.name)
            .order_by(
                order_column.desc() if sort.descending else order_column.asc(),
                Product.id.asc(),
            )
            .limit(limit)
        )
        rows = await self._fetch(
            "fetch_top_products",
            stmt,
            period,
            sort=f"{sort.sort_key} {sort.sort_order}",
            category_id=category_id,
            limit=limit,
        )

        return [
            TopProduct(
                name=row.product_name,
                price=round(float(row.price), 2),
                category=row.category_name,
                quantity=int(row.total_quantity or 0),
                amount=round(float(row.total_amount or 0), 2),
            )
            for row in rows
        ]
