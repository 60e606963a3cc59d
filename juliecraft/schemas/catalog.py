# juliecraft/schemas/catalog.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# -------------------------------------------------------------------
# Categories
# -------------------------------------------------------------------

class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    sort_order: int = 0


class CategoryCreate(CategoryBase):
    # Derived from the name when omitted
    slug: Optional[str] = Field(None, max_length=120, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class CategoryOut(CategoryBase):
    id: UUID
    slug: str
    tags: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryList(BaseModel):
    categories: List[CategoryOut]
    total: int
    limit: int
    offset: int


class CategoryStats(BaseModel):
    id: UUID
    name: str
    is_active: bool
    total_products: int = 0
    active_products: int = 0
    inactive_products: int = 0
    low_stock_products: int = 0
    total_inventory_value: float = 0


class CategoryStatsSummary(BaseModel):
    total_categories: int = 0
    active_categories: int = 0
    inactive_categories: int = 0
    total_products: int = 0
    total_inventory_value: float = 0
    average_products_per_category: float = 0


class CategoryStatsReport(BaseModel):
    categories: List[CategoryStats]
    summary: CategoryStatsSummary
