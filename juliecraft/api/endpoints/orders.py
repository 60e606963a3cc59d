# juliecraft/api/endpoints/orders.py
# type: ignore

import logging
import secrets
import string
import time
from decimal import Decimal
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, selectinload

from juliecraft.api.endpoints.auth import get_current_user, get_optional_user, require_admin
from juliecraft.api.endpoints.notifications import create_notification
from juliecraft.core.errors import AuthorizationError, NotFoundError, ValidationError
from juliecraft.core.permissions import AuthenticatedCaller, Authorized, check_admin_capability
from juliecraft.database import get_db
from juliecraft.models.auth import Profile, utcnow
from juliecraft.models.inventory import Product
from juliecraft.models.notifications import RECIPIENT_ADMIN, RECIPIENT_CUSTOMER
from juliecraft.models.orders import (
    Order,
    OrderItem,
    ORDER_CANCELLED,
    ORDER_DELIVERED,
    ORDER_SHIPPED,
    ORDER_STATUSES,
    PAYMENT_FAILED,
    PAYMENT_PAID,
    PAYMENT_PENDING,
    PAYMENT_REFUNDED,
    PAYMENT_STATUSES,
)
from juliecraft.schemas.orders import (
    OrderCancel,
    OrderCancelResult,
    OrderCreate,
    OrderList,
    OrderOut,
    OrderStatusUpdate,
    OrderTracking,
    UserOrders,
)

logger = logging.getLogger(__name__)

# Storefront, mounted under /api/orders
router = APIRouter()
# Fulfilment, mounted under /api/admin/orders
admin_router = APIRouter()


def generate_order_number() -> str:
    """ORD-<epoch millis>-<4 upper-case alphanumerics>."""
    suffix = "".join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(4))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


# Statuses the customer is notified about
CUSTOMER_NOTIFIED_STATUSES = (ORDER_SHIPPED, ORDER_DELIVERED, ORDER_CANCELLED)


def cancel_order(db: Session, order: Order, reason: Optional[str] = None) -> int:
    """
    Cancels the order in the session and puts every line back into stock.
    Returns how many lines were restocked; the caller commits.
    """
    if order.status == ORDER_CANCELLED:
        raise ValidationError("Order already cancelled")
    if order.status == ORDER_DELIVERED:
        raise ValidationError(
            "Cannot cancel delivered order",
            details="Delivered orders cannot be cancelled. Please process a return instead.",
        )

    restored = 0
    for item in order.items:
        product = db.get(Product, item.product_id) if item.product_id else None
        if product is None:
            # Product deleted since checkout
            logger.warning("Order %s: product %s not found, stock not restored", order.order_number, item.product_id)
            continue
        product.stock += item.quantity
        product.last_stock_update = utcnow()
        restored += 1

    order.status = ORDER_CANCELLED
    if order.payment_status == PAYMENT_PAID:
        order.payment_status = PAYMENT_REFUNDED
    elif order.payment_status == PAYMENT_PENDING:
        order.payment_status = PAYMENT_FAILED

    note = f"Order cancelled: {reason}" if reason else "Order cancelled"
    order.notes = f"{order.notes}\n\n{note}" if order.notes else note

    logger.info("Order %s cancelled, %d lines restocked", order.order_number, restored)
    return restored


def notify_customer_of_status(db: Session, order: Order):
    if order.user_id is None or order.status not in CUSTOMER_NOTIFIED_STATUSES:
        return
    create_notification(
        db,
        RECIPIENT_CUSTOMER,
        type="order_status",
        title="Order update",
        message=f"Your order {order.order_number} is now {order.status}",
        user_id=order.user_id,
        order_id=order.id,
    )


# ***************************************************************
# 1. Checkout (POST /)
# ***************************************************************
@router.post("/", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: OrderCreate,
    db: Session = Depends(get_db),
    caller: Optional[AuthenticatedCaller] = Depends(get_optional_user),
):
    """
    Places an order for a guest or a signed-in customer. Prices come from the
    catalogue, never from the client, and stock is decremented.
    """
    order = Order(
        order_number=generate_order_number(),
        user_id=caller.id if caller else None,
        customer_email=order_in.customer_email.lower(),
        customer_name=order_in.customer_name,
        customer_phone=order_in.customer_phone,
        shipping_address=order_in.shipping_address,
    )

    total = Decimal("0")
    for line in order_in.items:
        product = db.get(Product, line.product_id)
        if product is None:
            raise ValidationError("Product not found", details=str(line.product_id))
        if not product.is_active:
            raise ValidationError(f"Product is not available: {product.name}")
        if product.stock < line.quantity:
            raise ValidationError(
                f"Insufficient stock for {product.name}",
                details=f"{product.stock} available, {line.quantity} requested",
            )

        unit_price = Decimal(product.price)
        line_total = unit_price * line.quantity
        total += line_total

        product.stock -= line.quantity
        product.last_stock_update = utcnow()
        order.items.append(OrderItem(
            product_id=product.id,
            product_name=product.name,
            product_image=product.image_url,
            quantity=line.quantity,
            unit_price=unit_price,
            total_price=line_total,
        ))

    order.total = total
    db.add(order)
    db.flush()

    create_notification(
        db,
        RECIPIENT_ADMIN,
        type="new_order",
        title="New order received",
        message=f"Order {order.order_number} from {order.customer_name}",
        order_id=order.id,
        data={"order_number": order.order_number, "total": float(total)},
    )
    db.commit()
    db.refresh(order)

    logger.info("Order %s created (%d items)", order.order_number, len(order.items))
    return order


# ***************************************************************
# 2. Orders of the signed-in customer (GET /user)
# ***************************************************************
@router.get("/user", response_model=UserOrders)
def read_user_orders(
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    orders = (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == caller.id)
        .order_by(Order.order_date.desc())
        .all()
    )
    return {"orders": orders}


# ***************************************************************
# 3. Public tracking (GET /track/{order_number})
# ***************************************************************
@router.get("/track/{order_number}", response_model=OrderTracking)
def track_order(order_number: str, db: Session = Depends(get_db)):
    """Order status and lines for whoever holds the order number."""
    order = (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.order_number == order_number)
        .first()
    )
    if order is None:
        raise NotFoundError("Order not found")
    return order


# ***************************************************************
# 4. Cancel (POST /{order_id}/cancel)
# ***************************************************************
@router.post("/{order_id}/cancel", response_model=OrderCancelResult)
def cancel_order_endpoint(
    order_id: UUID,
    body: Optional[OrderCancel] = None,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    """The customer who placed the order, or any admin, may cancel it."""
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    is_owner = order.user_id is not None and order.user_id == caller.id
    if not is_owner and not isinstance(check_admin_capability(db.get(Profile, caller.id)), Authorized):
        raise AuthorizationError("Forbidden")

    restored = cancel_order(db, order, body.reason if body else None)
    if not is_owner:
        notify_customer_of_status(db, order)
    db.commit()
    db.refresh(order)

    return {
        "success": True,
        "message": "Order cancelled successfully and inventory restored",
        "order": order,
        "inventory_restored": restored,
    }


# ***************************************************************
# 5. Admin: list orders (GET /api/admin/orders)
# ***************************************************************
@admin_router.get("/", response_model=OrderList)
def list_orders(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
    status_filter: Optional[str] = Query(None, alias="status"),
    payment_status: Optional[str] = Query(None),
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
):
    query = db.query(Order)
    if status_filter:
        query = query.filter(Order.status == status_filter)
    if payment_status:
        query = query.filter(Order.payment_status == payment_status)

    total = query.count()
    orders = (
        query.options(selectinload(Order.items))
        .order_by(Order.order_date.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {"orders": orders, "total": total}


# ***************************************************************
# 6. Admin: fulfilment update (PATCH /api/admin/orders/{order_id})
# ***************************************************************
@admin_router.patch("/{order_id}", response_model=OrderOut)
def update_order_status(
    order_id: UUID,
    body: OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """Moves an order along. Shipped/delivered stamp their dates; cancelling restocks the lines."""
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    if body.status is not None and body.status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid order status: {body.status}")
    if body.payment_status is not None and body.payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid payment status: {body.payment_status}")

    if body.tracking_number is not None:
        order.tracking_number = body.tracking_number

    if body.status is not None and body.status != order.status:
        if body.status == ORDER_CANCELLED:
            # Same path as POST /api/orders/{id}/cancel, so stock comes back
            cancel_order(db, order)
        else:
            order.status = body.status
        if body.status == ORDER_SHIPPED and order.shipped_date is None:
            order.shipped_date = utcnow()
        if body.status == ORDER_DELIVERED and order.delivered_date is None:
            order.delivered_date = utcnow()

        notify_customer_of_status(db, order)
        logger.info("Order %s moved to %s by %s", order.order_number, order.status, admin.caller.email)

    # An explicit payment status wins over the one cancellation sets
    if body.payment_status is not None:
        order.payment_status = body.payment_status

    db.commit()
    db.refresh(order)
    return order
