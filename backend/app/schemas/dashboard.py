"""
Dashboard Pydantic schemas for aggregated sales data.
"""
from pydantic import BaseModel, ConfigDict, Field


class PeriodComparison(BaseModel):
    """Percent change of each summary metric against the previous period."""

    sales_change: float = Field(alias="salesChange")
    orders_change: float = Field(alias="ordersChange")
    revenue_change: float = Field(alias="revenueChange")
    fulfillment_rate_change: float = Field(alias="fulfillmentRateChange")

    model_config = ConfigDict(populate_by_name=True)


class SummaryTotal(BaseModel):
    """Headline metrics for the selected period."""

    total_sales: int = Field(alias="totalSales")
    total_orders: int = Field(alias="totalOrders")
    total_revenue: float = Field(alias="totalRevenue")
    fulfillment_rate: float = Field(alias="fulfillmentRate")
    comparisons: PeriodComparison

    model_config = ConfigDict(populate_by_name=True)


class LineChartPoint(BaseModel):
    """Revenue of one day or month bucket."""

    label: str
    total: int
    avg: int


class PieChartSlice(BaseModel):
    """Share of orders with a given status code, in percent."""

    label: str
    value: float


class BarChartEntry(BaseModel):
    """Revenue of one category."""

    label: str
    total: float


class DashboardData(BaseModel):
    """Complete dashboard payload."""

    summary_total: SummaryTotal = Field(alias="summaryTotal")
    line_chart_data: list[LineChartPoint] = Field(alias="lineChartData")
    pie_chart_data: list[PieChartSlice] = Field(alias="pieChartData")
    bar_chart_data: list[BarChartEntry] = Field(alias="barChartData")

    model_config = ConfigDict(populate_by_name=True)


class DashboardResponse(BaseModel):
    success: bool = True
    data: DashboardData


class TopProduct(BaseModel):
    """One row of the top-products ranking."""

    name: str
    price: float
    category: str
    quantity: int
    amount: float


class TopProductsResponse(BaseModel):
    success: bool = True
    data: list[TopProduct]
