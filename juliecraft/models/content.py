# juliecraft/models/content.py

import uuid

from sqlalchemy import Column, String, Boolean, Integer, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID

from juliecraft.database import Base
from juliecraft.models.auth import utcnow


class HomepageSection(Base):
    __tablename__ = "homepage_sections"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    section_type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(JSON, default=dict)
    display_settings = Column(JSON, default=dict)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class FooterContent(Base):
    """Footer blocks; the admin editor replaces the whole set at once."""
    __tablename__ = "footer_content"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    section_key = Column(String(50), nullable=False)
    title = Column(String(255))
    content = Column(JSON, default=dict)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
