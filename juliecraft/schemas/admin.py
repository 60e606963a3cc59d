# juliecraft/schemas/admin.py

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from juliecraft.schemas.auth import ProfileOut
from juliecraft.schemas.orders import OrderOut


class DashboardStats(BaseModel):
    """Flat summary with fixed camelCase keys; every value defaults to 0."""
    totalProducts: int = 0
    totalOrders: int = 0
    totalCustomers: int = 0
    totalRevenue: float = 0
    pendingOrders: int = 0
    lowStockProducts: int = 0


class AlertCounts(BaseModel):
    unreadNotifications: int = 0
    lowStockProducts: int = 0
    outOfStockProducts: int = 0
    pendingOrders: int = 0


class StockMigrationSummary(BaseModel):
    total_products: int = 0
    products_with_stock: int = 0
    total_physical_stock: int = 0
    total_reserved_stock: int = 0


class StockMigrationResult(BaseModel):
    success: bool = True
    message: str
    columns_added: List[str] = []
    products_migrated: int = 0
    summary: StockMigrationSummary


class UserAdminUpdate(BaseModel):
    status: Optional[str] = None
    role: Optional[str] = None
    is_admin: Optional[bool] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UserList(BaseModel):
    users: List[ProfileOut]
    total: int


class CustomerOut(BaseModel):
    id: UUID
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    total_orders: int = 0
    total_spent: float = 0
    last_order_date: Optional[datetime] = None


class CustomerList(BaseModel):
    customers: List[CustomerOut]
    total: int
    limit: int
    offset: int


class CustomerStats(BaseModel):
    total_customers: int = 0
    active_customers: int = 0
    inactive_customers: int = 0
    new_customers_this_month: int = 0
    total_revenue: float = 0
    average_order_value: float = 0


class CustomerOrders(BaseModel):
    customer_id: UUID
    customer_name: Optional[str] = None
    orders: List[OrderOut]
    total_orders: int = 0
    total_spent: float = 0
