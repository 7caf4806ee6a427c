"""
Category and product listing schemas.
"""
from pydantic import BaseModel, ConfigDict


class CategorySummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProductSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryListResponse(BaseModel):
    success: bool = True
    data: list[CategorySummary]


class ProductListResponse(BaseModel):
    success: bool = True
    data: list[ProductSummary]
