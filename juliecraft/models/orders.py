# juliecraft/models/orders.py

import uuid

from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, DateTime, JSON, Text
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID

from juliecraft.database import Base
from juliecraft.models.auth import utcnow

ORDER_PENDING = "pending"
ORDER_PROCESSING = "processing"
ORDER_SHIPPED = "shipped"
ORDER_DELIVERED = "delivered"
ORDER_COMPLETED = "completed"
ORDER_CANCELLED = "cancelled"
ORDER_STATUSES = (
    ORDER_PENDING, ORDER_PROCESSING, ORDER_SHIPPED,
    ORDER_DELIVERED, ORDER_COMPLETED, ORDER_CANCELLED,
)

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_FAILED = "failed"
PAYMENT_REFUNDED = "refunded"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PAID, PAYMENT_FAILED, PAYMENT_REFUNDED)


class Order(Base):
    """Model for the orders table."""
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    order_number = Column(String(40), unique=True, index=True, nullable=False)

    # Null for guest checkouts
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_email = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(50))
    shipping_address = Column(JSON)

    status = Column(String(20), default=ORDER_PENDING, nullable=False, index=True)
    payment_status = Column(String(20), default="pending", nullable=False)
    total = Column(Numeric(10, 2), default=0, nullable=False)

    tracking_number = Column(String(100))
    notes = Column(Text)
    order_date = Column(DateTime(timezone=True), default=utcnow)
    shipped_date = Column(DateTime(timezone=True))
    delivered_date = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """One line of an order; name, price and image are copied at checkout time."""
    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    product_name = Column(String(255), nullable=False)
    product_image = Column(String(500))
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")
