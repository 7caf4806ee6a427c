"""
Category API routes.
"""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.exceptions import ServiceError
from app.core.logging import get_logger
from app.repositories.category import CategoryRepository
from app.schemas.catalog import CategoryListResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/category", tags=["catalog"])


async def get_category_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CategoryRepository:
    """Dependency to get category repository."""
    return CategoryRepository(session)


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    repo: Annotated[CategoryRepository, Depends(get_category_repository)],
) -> CategoryListResponse:
    """List all categories."""
    try:
        categories = await repo.list_summaries()
    except SQLAlchemyError as e:
        logger.error("Error getting categories", error=str(e))
        raise ServiceError("Failed to get categories", error=str(e)) from e

    return CategoryListResponse(data=categories)
