"""
Product API routes.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.exceptions import ServiceError
from app.core.logging import get_logger
from app.repositories.product import ProductRepository
from app.schemas.catalog import ProductListResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/product", tags=["catalog"])


async def get_product_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProductRepository:
    """Dependency to get product repository."""
    return ProductRepository(session)


async def _list_products(
    repo: ProductRepository,
    category_id: Optional[int] = None,
) -> ProductListResponse:
    try:
        products = await repo.list_summaries(category_id)
    except SQLAlchemyError as e:
        logger.error("Error getting products", category_id=category_id, error=str(e))
        message = "Failed to get products" if category_id is None else "Failed to get products by category"
        raise ServiceError(message, error=str(e)) from e

    return ProductListResponse(data=products)


@router.get("", response_model=ProductListResponse)
async def list_products(
    repo: Annotated[ProductRepository, Depends(get_product_repository)],
) -> ProductListResponse:
    """List all products."""
    return await _list_products(repo)


@router.get("/{category_id}", response_model=ProductListResponse)
async def list_products_by_category(
    category_id: int,
    repo: Annotated[ProductRepository, Depends(get_product_repository)],
) -> ProductListResponse:
    """List the products of one category."""
    return await _list_products(repo, category_id)
