# juliecraft/models/cart.py

import uuid

from sqlalchemy import Column, String, DateTime, JSON, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID

from juliecraft.database import Base
from juliecraft.models.auth import utcnow


class UserCart(Base):
    """
    Whole cart stored as one JSON blob, overwritten on every save.
    A row is keyed by exactly one of user_id or session_id.
    """
    __tablename__ = "user_carts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), unique=True, nullable=True, index=True)
    session_id = Column(String(128), unique=True, nullable=True, index=True)
    cart_data = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="ck_user_carts_single_key",
        ),
    )
