# juliecraft/api/endpoints/categories.py
# type: ignore

import logging
import re
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import require_admin
from juliecraft.core.config import LOW_STOCK_THRESHOLD
from juliecraft.core.errors import ConflictError, NotFoundError
from juliecraft.core.permissions import Authorized
from juliecraft.database import get_db
from juliecraft.models.catalog import Category
from juliecraft.models.inventory import Product
from juliecraft.schemas.auth import MessageResponse
from juliecraft.schemas.catalog import (
    CategoryCreate,
    CategoryList,
    CategoryOut,
    CategoryStatsReport,
    CategoryUpdate,
)

logger = logging.getLogger(__name__)

# Storefront, mounted under /api/categories
router = APIRouter()
# Management, mounted under /api/admin/categories
admin_router = APIRouter()


def slugify(name: str) -> str:
    """'Hand-made  Ceramics!' -> 'hand-made-ceramics'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def get_category_or_404(category_id: UUID, db: Session) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _ensure_unique(db: Session, name: str, slug: str, exclude_id: Optional[UUID] = None):
    query = db.query(Category).filter(or_(Category.name == name, Category.slug == slug))
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise ConflictError("A category with this name or slug already exists")


def _paginate(query, limit: int, offset: int) -> dict:
    total = query.count()
    categories = (
        query.order_by(Category.sort_order.asc(), Category.name.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {"categories": categories, "total": total, "limit": limit, "offset": offset}


# ***************************************************************
# 1. Public listing (GET /api/categories/)
# ***************************************************************
@router.get("/", response_model=CategoryList)
def list_categories(
    db: Session = Depends(get_db),
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
):
    """Active categories only, in display order."""
    return _paginate(db.query(Category).filter(Category.is_active.is_(True)), limit, offset)


# ***************************************************************
# 2. Public read by id or slug (GET /api/categories/{key})
# ***************************************************************
@router.get("/{key}")
def read_category(key: str, db: Session = Depends(get_db)):
    query = db.query(Category).filter(Category.is_active.is_(True))
    try:
        query = query.filter(Category.id == UUID(key))
    except ValueError:
        query = query.filter(Category.slug == key)

    category = query.first()
    if category is None:
        raise NotFoundError("Category not found")
    return {"category": CategoryOut.model_validate(category)}


# ***************************************************************
# 3. Admin listing (GET /api/admin/categories/)
# ***************************************************************
@admin_router.get("/", response_model=CategoryList)
def list_all_categories(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
):
    return _paginate(db.query(Category), limit, offset)


# ***************************************************************
# 4. Per-category product statistics (GET /api/admin/categories/stats)
# ***************************************************************
@admin_router.get("/stats", response_model=CategoryStatsReport)
def read_category_stats(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    rows = (
        db.query(
            Product.category_id,
            func.count(Product.id),
            func.count(case((Product.is_active.is_(True), 1))),
            func.count(case((Product.stock < LOW_STOCK_THRESHOLD, 1))),
            func.sum(Product.price * Product.stock),
        )
        .filter(Product.category_id.isnot(None))
        .group_by(Product.category_id)
        .all()
    )
    by_category = {row[0]: row[1:] for row in rows}

    categories = db.query(Category).order_by(Category.sort_order.asc(), Category.name.asc()).all()
    stats = []
    for category in categories:
        total, active, low_stock, value = by_category.get(category.id, (0, 0, 0, None))
        stats.append({
            "id": category.id,
            "name": category.name,
            "is_active": category.is_active,
            "total_products": total,
            "active_products": active,
            "inactive_products": total - active,
            "low_stock_products": low_stock,
            "total_inventory_value": float(value or 0),
        })

    total_products = sum(s["total_products"] for s in stats)
    active_categories = sum(1 for s in stats if s["is_active"])
    return {
        "categories": stats,
        "summary": {
            "total_categories": len(stats),
            "active_categories": active_categories,
            "inactive_categories": len(stats) - active_categories,
            "total_products": total_products,
            "total_inventory_value": sum(s["total_inventory_value"] for s in stats),
            "average_products_per_category": total_products / len(stats) if stats else 0,
        },
    }


# ***************************************************************
# 5. Create (POST /api/admin/categories/)
# ***************************************************************
@admin_router.post("/", status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    data = category_in.model_dump()
    data["slug"] = data["slug"] or slugify(category_in.name)
    _ensure_unique(db, data["name"], data["slug"])

    category = Category(**data)
    db.add(category)
    db.commit()
    db.refresh(category)

    logger.info("Category %s created by %s", category.slug, admin.caller.email)
    return {"category": CategoryOut.model_validate(category)}


# ***************************************************************
# 6. Update (PATCH /api/admin/categories/{category_id})
# ***************************************************************
@admin_router.patch("/{category_id}")
def update_category(
    category_id: UUID,
    category_in: CategoryUpdate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    category = get_category_or_404(category_id, db)
    update_data = {k: v for k, v in category_in.model_dump(exclude_unset=True).items() if v is not None}

    if "name" in update_data or "slug" in update_data:
        _ensure_unique(
            db,
            update_data.get("name", category.name),
            update_data.get("slug", category.slug),
            exclude_id=category.id,
        )

    for key, value in update_data.items():
        setattr(category, key, value)

    db.commit()
    db.refresh(category)
    return {"category": CategoryOut.model_validate(category)}


# ***************************************************************
# 7. Delete (DELETE /api/admin/categories/{category_id})
# ***************************************************************
@admin_router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """Products in the category stay, uncategorised."""
    category = get_category_or_404(category_id, db)
    db.query(Product).filter(Product.category_id == category.id).update(
        {Product.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()

    logger.info("Category %s deleted by %s", category.slug, admin.caller.email)
    return {"success": True, "message": "Category deleted successfully"}
