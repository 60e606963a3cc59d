# juliecraft/schemas/inventory.py

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

# -------------------------------------------------------------------
# Base Schemas
# -------------------------------------------------------------------

class ProductBase(BaseModel):
    name: str = Field(..., max_length=255)
    sku: str = Field(..., max_length=50, description="Stock Keeping Unit (unique)")
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    category_id: Optional[UUID] = None
    image_url: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0, decimal_places=2, description="Selling price")
    stock: int = Field(0, ge=0)
    min_stock_level: Optional[int] = Field(10, ge=0)
    is_active: bool = True

    model_config = {
        "from_attributes": True,
    }

    # Decimal goes out as a JSON number
    @field_serializer("price")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)

# -------------------------------------------------------------------
# Input Schemas
# -------------------------------------------------------------------

class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    sku: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    category_id: Optional[UUID] = None
    image_url: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    min_stock_level: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

# -------------------------------------------------------------------
# Output Schemas
# -------------------------------------------------------------------

class ProductInDB(ProductBase):
    id: UUID
    physical_stock: Optional[int] = None
    reserved_stock: Optional[int] = None
    reorder_point: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductList(BaseModel):
    products: List[ProductInDB]
    total: int
