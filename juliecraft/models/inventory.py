# juliecraft/models/inventory.py

import uuid

from sqlalchemy import Column, String, Boolean, Integer, Numeric, Text, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from juliecraft.database import Base
from juliecraft.models.auth import utcnow


class Product(Base):
    """Model for the products table."""
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    name = Column(String(255), nullable=False)
    sku = Column(String(50), unique=True, nullable=False)
    description = Column(Text)
    category = Column(String(100))
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    image_url = Column(String(500))

    # NUMERIC(10,2) for money
    price = Column(Numeric(10, 2), nullable=False)

    stock = Column(Integer, default=0, nullable=False)
    min_stock_level = Column(Integer, default=10)

    # Robust inventory columns (filled in by the stock migration)
    physical_stock = Column(Integer, default=0)
    reserved_stock = Column(Integer, default=0)
    reorder_point = Column(Integer, default=10)
    max_stock_level = Column(Integer, default=1000)
    last_stock_update = Column(DateTime(timezone=True), default=utcnow)
    # Never read or compared anywhere yet
    version = Column(Integer, default=1)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
