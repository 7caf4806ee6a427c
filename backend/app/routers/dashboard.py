"""
Dashboard API routes for aggregated sales data.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.database import SessionFactory
from app.core.exceptions import InvalidParameterError
from app.schemas.dashboard import DashboardResponse, TopProductsResponse
from app.services.dashboard_metrics import DashboardMetrics
from app.services.dashboard_service import DashboardService
from app.services.excel_export import TOP_PRODUCTS_FILENAME, XLSX_MEDIA_TYPE

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RangeQuery = Annotated[
    Optional[str],
    Query(alias="range", description="7 = last 7 days, 01 = year to date, 02 = month to date"),
]
SortQuery = Annotated[
    Optional[str],
    Query(alias="sort", description="<name|price|category|quantity|amount>-<asc|desc>"),
]
CategoryQuery = Annotated[
    Optional[str],
    Query(alias="category_id", description="Restrict to one category; empty means all"),
]


def get_category_filter(category_value: CategoryQuery = None) -> Optional[int]:
    """An absent or empty `category_id` means every category."""
    if not category_value:
        return None
    try:
        return int(category_value)
    except ValueError as e:
        raise InvalidParameterError("category_id", category_value) from e


CategoryFilter = Annotated[Optional[int], Depends(get_category_filter)]


def get_dashboard_service(session_factory: SessionFactory) -> DashboardService:
    """Dependency to get the dashboard service."""
    return DashboardService(DashboardMetrics(session_factory))


DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    service: DashboardServiceDep,
    range_value: RangeQuery = None,
) -> DashboardResponse:
    """Summary metrics and chart feeds for the selected range."""
    data = await service.get_dashboard(range_value)
    return DashboardResponse(data=data)


@router.get("/top-products", response_model=TopProductsResponse)
async def get_top_products(
    service: DashboardServiceDep,
    category_id: CategoryFilter,
    range_value: RangeQuery = None,
    sort_value: SortQuery = None,
) -> TopProductsResponse:
    """Best selling products of the selected range."""
    products = await service.get_top_products(range_value, sort_value, category_id)
    return TopProductsResponse(data=products)


@router.get(
    "/export-top-products",
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}},
        204: {"description": "No products in the selected range"},
    },
)
async def export_top_products(
    service: DashboardServiceDep,
    category_id: CategoryFilter,
    range_value: RangeQuery = None,
    sort_value: SortQuery = None,
) -> Response:
    """Download the top products ranking as an Excel file."""
    buffer = await service.export_top_products(range_value, sort_value, category_id)
    if buffer is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return Response(
        content=buffer,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={TOP_PRODUCTS_FILENAME}"},
    )
