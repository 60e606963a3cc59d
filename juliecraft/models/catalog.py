# juliecraft/models/catalog.py

import uuid

from sqlalchemy import Column, String, Boolean, Integer, Text, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID

from juliecraft.database import Base
from juliecraft.models.auth import utcnow


class Category(Base):
    """Storefront product categories, ordered by sort_order."""
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    description = Column(Text)
    image_url = Column(String(500))
    tags = Column(JSON, default=list)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
