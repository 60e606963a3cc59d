# juliecraft/api/endpoints/products.py
# type: ignore

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import require_admin
from juliecraft.core.errors import NotFoundError, ValidationError
from juliecraft.core.permissions import Authorized
from juliecraft.database import get_db
from juliecraft.models.auth import utcnow
from juliecraft.models.catalog import Category
from juliecraft.models.inventory import Product
from juliecraft.schemas.inventory import ProductCreate, ProductInDB, ProductList, ProductUpdate

# Admin management, mounted under /api/admin/products
router = APIRouter()
# Public storefront catalogue, mounted under /api/products
catalog_router = APIRouter()


def get_product_or_404(product_id: UUID, db: Session) -> Product:
    """Looks a product up by ID."""
    product = db.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def _apply_search(query, search: Optional[str]):
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))
    return query


def _check_category(db: Session, category_id: Optional[UUID]):
    if category_id is not None and db.get(Category, category_id) is None:
        raise ValidationError("Category not found", details=str(category_id))


# ***************************************************************
# 1. Create a product (POST /)
# ***************************************************************
@router.post("/", response_model=ProductInDB, status_code=status.HTTP_201_CREATED)
def create_product(
    product_in: ProductCreate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """Creates a product. SKUs are unique across the catalogue."""
    if db.query(Product).filter(Product.sku == product_in.sku).first():
        raise ValidationError("A product with this SKU already exists")
    _check_category(db, product_in.category_id)

    db_product = Product(**product_in.model_dump())
    # New products start with the robust stock columns in sync
    db_product.physical_stock = db_product.stock
    db_product.reorder_point = product_in.min_stock_level if product_in.min_stock_level is not None else 10

    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


# ***************************************************************
# 2. List products (GET /)
# ***************************************************************
@router.get("/", response_model=ProductList)
def read_products(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
    limit: int = Query(100, gt=0, le=500),
    skip: int = Query(0, ge=0),
    search: Optional[str] = Query(None, description="Search by name or SKU."),
    low_stock_below: Optional[int] = Query(None, ge=0, description="Only products with stock below this value."),
):
    """Lists every product, active or not."""
    query = _apply_search(db.query(Product), search)
    if low_stock_below is not None:
        query = query.filter(Product.stock < low_stock_below)

    total = query.count()
    products = query.order_by(Product.created_at.desc()).offset(skip).limit(limit).all()
    return {"products": products, "total": total}


# ***************************************************************
# 3. Read one product (GET /{product_id})
# ***************************************************************
@router.get("/{product_id}", response_model=ProductInDB)
def read_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    return get_product_or_404(product_id, db)


# ***************************************************************
# 4. Update a product (PATCH /{product_id})
# ***************************************************************
@router.patch("/{product_id}", response_model=ProductInDB)
def update_product(
    product_id: UUID,
    product_in: ProductUpdate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """Updates only the fields that were sent."""
    db_product = get_product_or_404(product_id, db)
    update_data = product_in.model_dump(exclude_unset=True)

    if "sku" in update_data and update_data["sku"] != db_product.sku:
        if db.query(Product).filter(Product.sku == update_data["sku"]).first():
            raise ValidationError("Another product already uses this SKU")
    if update_data.get("category_id") is not None:
        _check_category(db, update_data["category_id"])

    for key, value in update_data.items():
        if value is not None:
            setattr(db_product, key, value)

    if "stock" in update_data and update_data["stock"] is not None:
        db_product.physical_stock = update_data["stock"]
        db_product.last_stock_update = utcnow()
    if "min_stock_level" in update_data and update_data["min_stock_level"] is not None:
        db_product.reorder_point = update_data["min_stock_level"]

    db.commit()
    db.refresh(db_product)
    return db_product


# ***************************************************************
# 5. Delete a product (DELETE /{product_id})
# ***************************************************************
@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    db_product = get_product_or_404(product_id, db)
    db.delete(db_product)
    db.commit()
    return


# ***************************************************************
# 6. Public catalogue
# ***************************************************************
@catalog_router.get("/", response_model=ProductList)
def list_catalogue(
    db: Session = Depends(get_db),
    limit: int = Query(50, gt=0, le=200),
    skip: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    category_id: Optional[UUID] = Query(None),
):
    """Active products only, newest first."""
    query = _apply_search(db.query(Product).filter(Product.is_active.is_(True)), search)
    if category:
        query = query.filter(Product.category == category)
    if category_id:
        query = query.filter(Product.category_id == category_id)

    total = query.count()
    products = query.order_by(Product.created_at.desc()).offset(skip).limit(limit).all()
    return {"products": products, "total": total}


@catalog_router.get("/{product_id}", response_model=ProductInDB)
def read_catalogue_product(product_id: UUID, db: Session = Depends(get_db)):
    product = get_product_or_404(product_id, db)
    if not product.is_active:
        raise NotFoundError("Product not found")
    return product
