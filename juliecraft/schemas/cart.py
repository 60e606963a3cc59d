# juliecraft/schemas/cart.py

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class CartSave(BaseModel):
    # Opaque blob from the storefront; stored as-is
    cart_data: Optional[Any] = None
    user_id: Optional[str] = Field(None, max_length=64)
    session_id: Optional[str] = Field(None, max_length=128)


class CartLoad(BaseModel):
    cart_data: Optional[Any] = None
    updated_at: Optional[datetime] = None


class CartMigrate(BaseModel):
    session_id: Optional[str] = None
    guest_cart_data: Optional[List[dict]] = None


class CartMigrateResult(BaseModel):
    success: bool = True
    message: str
    cart_data: List[dict]
