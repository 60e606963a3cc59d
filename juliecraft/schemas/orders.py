# juliecraft/schemas/orders.py

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer

# ***************************************************************
# 1. Checkout
# ***************************************************************

class OrderItemCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(..., gt=0)


class OrderCreate(BaseModel):
    customer_email: EmailStr
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    shipping_address: Dict[str, Any] = Field(default_factory=dict)
    items: List[OrderItemCreate] = Field(..., min_length=1)


# ***************************************************************
# 2. Read models
# ***************************************************************

class OrderItemOut(BaseModel):
    product_id: Optional[UUID] = None
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    image: Optional[str] = Field(None, validation_alias="product_image")

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("unit_price", "total_price")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)


class OrderOut(BaseModel):
    id: UUID
    order_number: str
    customer_email: str
    customer_name: str
    customer_phone: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    status: str
    payment_status: str
    total: Decimal
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    order_date: Optional[datetime] = None
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("total")
    def serialize_total(self, value: Decimal) -> float:
        return float(value)


class OrderTracking(BaseModel):
    """What a shopper sees when tracking by order number (no internal ids or email)."""
    order_number: str
    customer_name: str
    status: str
    payment_status: str
    total: Decimal
    order_date: Optional[datetime] = None
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None
    tracking_number: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("total")
    def serialize_total(self, value: Decimal) -> float:
        return float(value)


class OrderList(BaseModel):
    orders: List[OrderOut]
    total: int


class UserOrders(BaseModel):
    orders: List[OrderOut]


# ***************************************************************
# 3. Fulfilment (admin)
# ***************************************************************

class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None
    payment_status: Optional[str] = None
    tracking_number: Optional[str] = Field(None, max_length=100)


class OrderCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class OrderCancelResult(BaseModel):
    success: bool = True
    message: str
    order: OrderOut
    inventory_restored: int = 0
