# juliecraft/api/endpoints/customers.py
# type: ignore

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from juliecraft.api.endpoints.auth import require_admin
from juliecraft.core.errors import NotFoundError
from juliecraft.core.permissions import Authorized
from juliecraft.database import get_db
from juliecraft.models.auth import Profile, STATUS_ACTIVE, STATUS_INACTIVE
from juliecraft.models.orders import Order, ORDER_CANCELLED
from juliecraft.schemas.admin import CustomerList, CustomerOrders, CustomerOut, CustomerStats

# Mounted under /api/admin/customers
router = APIRouter()

SORT_FIELDS = ("created_at", "email", "total_orders", "total_spent", "last_order_date")


def _order_totals(db: Session):
    """Per-user order count, spend and last order date; cancelled orders do not count."""
    return (
        db.query(
            Order.user_id.label("user_id"),
            func.count(Order.id).label("total_orders"),
            func.sum(Order.total).label("total_spent"),
            func.max(Order.order_date).label("last_order_date"),
        )
        .filter(Order.user_id.isnot(None), Order.status != ORDER_CANCELLED)
        .group_by(Order.user_id)
        .subquery()
    )


def _customers_query(db: Session):
    totals = _order_totals(db)
    total_orders = func.coalesce(totals.c.total_orders, 0)
    total_spent = func.coalesce(totals.c.total_spent, 0)
    query = (
        db.query(Profile, total_orders, total_spent, totals.c.last_order_date)
        .outerjoin(totals, totals.c.user_id == Profile.id)
        .filter(Profile.is_admin.is_(False))
    )
    columns = {
        "created_at": Profile.created_at,
        "email": Profile.email,
        "total_orders": total_orders,
        "total_spent": total_spent,
        "last_order_date": totals.c.last_order_date,
    }
    return query, columns


def _to_customer(profile: Profile, total_orders, total_spent, last_order_date) -> CustomerOut:
    return CustomerOut(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        phone=profile.phone,
        status=profile.status,
        created_at=profile.created_at,
        total_orders=int(total_orders or 0),
        total_spent=float(total_spent or 0),
        last_order_date=last_order_date,
    )


def _get_customer_or_404(db: Session, customer_id: UUID):
    query, _ = _customers_query(db)
    row = query.filter(Profile.id == customer_id).first()
    if row is None:
        raise NotFoundError("Customer not found")
    return row


# ***************************************************************
# 1. List customers (GET /)
# ***************************************************************
@router.get("/", response_model=CustomerList)
def list_customers(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
    search: Optional[str] = Query(None, description="Match on email or name"),
    status: Optional[str] = Query(None, pattern="^(active|inactive)$"),
    min_orders: Optional[int] = Query(None, ge=0),
    min_spent: Optional[float] = Query(None, ge=0),
    sort_by: str = Query("created_at", pattern="^(" + "|".join(SORT_FIELDS) + ")$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    limit: int = Query(20, gt=0, le=100),
    offset: int = Query(0, ge=0),
):
    """Customer profiles with their order count and spend."""
    query, columns = _customers_query(db)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Profile.email.ilike(pattern),
            Profile.first_name.ilike(pattern),
            Profile.last_name.ilike(pattern),
        ))
    if status:
        query = query.filter(Profile.status == status)
    if min_orders is not None:
        query = query.filter(columns["total_orders"] >= min_orders)
    if min_spent is not None:
        query = query.filter(columns["total_spent"] >= min_spent)

    total = query.count()
    order_column = columns[sort_by]
    order_column = order_column.asc() if sort_order == "asc" else order_column.desc()
    rows = query.order_by(order_column, Profile.email.asc()).offset(offset).limit(limit).all()

    return {
        "customers": [_to_customer(*row) for row in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


# ***************************************************************
# 2. Customer statistics (GET /stats)
# ***************************************************************
@router.get("/stats", response_model=CustomerStats)
def read_customer_stats(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    customers = db.query(Profile).filter(Profile.is_admin.is_(False))
    start_of_month = datetime.now(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    order_count, revenue = (
        db.query(func.count(Order.id), func.sum(Order.total))
        .select_from(Order)
        .join(Profile, Profile.id == Order.user_id)
        .filter(Profile.is_admin.is_(False), Order.status != ORDER_CANCELLED)
        .one()
    )
    revenue = float(revenue or 0)

    return {
        "total_customers": customers.count(),
        "active_customers": customers.filter(Profile.status == STATUS_ACTIVE).count(),
        "inactive_customers": customers.filter(Profile.status == STATUS_INACTIVE).count(),
        "new_customers_this_month": customers.filter(Profile.created_at >= start_of_month).count(),
        "total_revenue": revenue,
        "average_order_value": revenue / order_count if order_count else 0,
    }


# ***************************************************************
# 3. One customer (GET /{customer_id})
# ***************************************************************
@router.get("/{customer_id}", response_model=CustomerOut)
def read_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    return _to_customer(*_get_customer_or_404(db, customer_id))


# ***************************************************************
# 4. A customer's orders (GET /{customer_id}/orders)
# ***************************************************************
@router.get("/{customer_id}/orders", response_model=CustomerOrders)
def read_customer_orders(
    customer_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
    limit: int = Query(10, ge=1, le=100),
):
    """Most recent orders first, cancelled ones included."""
    customer = _to_customer(*_get_customer_or_404(db, customer_id))
    orders = (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == customer_id)
        .order_by(Order.order_date.desc())
        .limit(limit)
        .all()
    )
    return {
        "customer_id": customer.id,
        "customer_name": customer.full_name,
        "orders": orders,
        "total_orders": customer.total_orders,
        "total_spent": customer.total_spent,
    }
