# juliecraft/api/endpoints/admin.py

import logging
import math
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, inspect, or_, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import require_admin
from juliecraft.core.config import LOW_STOCK_THRESHOLD
from juliecraft.core.errors import UpstreamError
from juliecraft.core.permissions import Authorized
from juliecraft.database import get_db
from juliecraft.models.auth import Profile
from juliecraft.models.inventory import Product
from juliecraft.models.notifications import Notification, RECIPIENT_ADMIN
from juliecraft.models.orders import Order, ORDER_COMPLETED, ORDER_PENDING
from juliecraft.schemas.admin import AlertCounts, DashboardStats, StockMigrationResult

logger = logging.getLogger(__name__)

router = APIRouter()


# ***************************************************************
# Aggregation queries
# ***************************************************************
# Each one is a separate statement with no shared transaction snapshot, so
# under concurrent writes the numbers may come from slightly different
# moments. None of them depends on another.

def _as_count(value) -> int:
    return int(value or 0)


def _as_amount(value) -> float:
    if value is None:
        return 0.0
    amount = float(value)
    return 0.0 if math.isnan(amount) else amount


def count_products(db: Session) -> int:
    return _as_count(db.query(func.count(Product.id)).scalar())


def count_orders(db: Session) -> int:
    return _as_count(db.query(func.count(Order.id)).scalar())


def count_customers(db: Session) -> int:
    """Every profile without the admin flag."""
    return _as_count(db.query(func.count(Profile.id)).filter(Profile.is_admin.is_(False)).scalar())


def completed_revenue(db: Session) -> float:
    value = db.query(func.sum(Order.total)).filter(Order.status == ORDER_COMPLETED).scalar()
    return _as_amount(value)


def count_pending_orders(db: Session) -> int:
    return _as_count(db.query(func.count(Order.id)).filter(Order.status == ORDER_PENDING).scalar())


def count_low_stock(db: Session, threshold: int = LOW_STOCK_THRESHOLD) -> int:
    """Products strictly below the threshold (a product at exactly the threshold is fine)."""
    return _as_count(db.query(func.count(Product.id)).filter(Product.stock < threshold).scalar())


def count_out_of_stock(db: Session) -> int:
    return _as_count(db.query(func.count(Product.id)).filter(Product.stock <= 0).scalar())


def count_unread_admin_notifications(db: Session) -> int:
    return _as_count(
        db.query(func.count(Notification.id))
        .filter(
            Notification.recipient_type == RECIPIENT_ADMIN,
            Notification.user_id.is_(None),
            Notification.is_read.is_(False),
        )
        .scalar()
    )


# ***************************************************************
# 1. Dashboard (GET /dashboard)
# ***************************************************************
@router.get("/dashboard", response_model=DashboardStats)
def read_dashboard(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """
    Headline numbers for the admin home page. If any single query fails the
    whole request fails; there is no partial result.
    """
    return DashboardStats(
        totalProducts=count_products(db),
        totalOrders=count_orders(db),
        totalCustomers=count_customers(db),
        totalRevenue=completed_revenue(db),
        pendingOrders=count_pending_orders(db),
        lowStockProducts=count_low_stock(db),
    )


# ***************************************************************
# 2. Badge counters (GET /alerts/counts)
# ***************************************************************
@router.get("/alerts/counts", response_model=AlertCounts)
def read_alert_counts(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """All the cheap counters the admin header polls, in one round trip."""
    return AlertCounts(
        unreadNotifications=count_unread_admin_notifications(db),
        lowStockProducts=count_low_stock(db),
        outOfStockProducts=count_out_of_stock(db),
        pendingOrders=count_pending_orders(db),
    )


# ***************************************************************
# 3. One-off stock migration (POST /migrate-stock)
# ***************************************************************

# Column name -> DDL type clause
STOCK_COLUMNS = {
    "physical_stock": "INTEGER DEFAULT 0",
    "reserved_stock": "INTEGER DEFAULT 0",
    "reorder_point": "INTEGER DEFAULT 10",
    "max_stock_level": "INTEGER DEFAULT 1000",
    "last_stock_update": "TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP",
    "version": "INTEGER DEFAULT 1",
}


def add_missing_stock_columns(db: Session) -> List[str]:
    """Adds whichever robust-inventory columns the products table lacks."""
    existing = {col["name"] for col in inspect(db.connection()).get_columns(Product.__tablename__)}
    added = []

    for name, ddl in STOCK_COLUMNS.items():
        if name in existing:
            continue
        try:
            # Savepoint so one failed ALTER does not abort the whole transaction
            with db.begin_nested():
                db.execute(text(f"ALTER TABLE {Product.__tablename__} ADD COLUMN {name} {ddl}"))
            added.append(name)
        except SQLAlchemyError as exc:
            logger.warning("Column setup warning for %s: %s", name, exc)

    return added


def copy_stock_into_new_columns(db: Session) -> int:
    """Seeds the robust columns for rows that were never migrated."""
    return (
        db.query(Product)
        .filter(or_(Product.physical_stock.is_(None), Product.physical_stock == 0))
        .update(
            {
                Product.physical_stock: func.coalesce(Product.stock, 0),
                Product.reserved_stock: 0,
                Product.reorder_point: func.coalesce(Product.min_stock_level, 10),
                Product.max_stock_level: 1000,
                Product.last_stock_update: func.now(),
                Product.version: 1,
            },
            synchronize_session=False,
        )
    )


def stock_summary(db: Session) -> dict:
    total, with_stock, physical, reserved = db.query(
        func.count(Product.id),
        func.count(case((Product.physical_stock > 0, 1))),
        func.sum(Product.physical_stock),
        func.sum(Product.reserved_stock),
    ).one()
    return {
        "total_products": _as_count(total),
        "products_with_stock": _as_count(with_stock),
        "total_physical_stock": _as_count(physical),
        "total_reserved_stock": _as_count(reserved),
    }


@router.post("/migrate-stock", response_model=StockMigrationResult)
def migrate_stock(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """
    Fixed sequence: add missing columns, copy stock over, report a summary.
    Not versioned and not reversible; running it twice is harmless.
    """
    logger.info("Starting stock data migration (requested by %s)", admin.caller.email)

    added = add_missing_stock_columns(db)
    try:
        migrated = copy_stock_into_new_columns(db)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Stock migration failed")
        raise UpstreamError("Failed to migrate stock data", details=str(exc)) from exc

    summary = stock_summary(db)
    logger.info("Stock migration completed: %d products migrated, columns added %s", migrated, added)
    return {
        "success": True,
        "message": "Stock data migrated successfully",
        "columns_added": added,
        "products_migrated": migrated,
        "summary": summary,
    }
