# juliecraft/models/auth.py

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID

from juliecraft.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Role names stored on profiles.role
ROLE_CUSTOMER = "customer"
ROLE_MANAGER = "manager"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"
ROLES = (ROLE_CUSTOMER, ROLE_MANAGER, ROLE_ADMIN, ROLE_SUPER_ADMIN)

# Profiles are never deleted, only deactivated
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class Profile(Base):
    """Identity row: the single source for login, bearer checks and admin rights."""
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(100))
    last_name = Column(String(100))
    phone = Column(String(50))
    avatar_url = Column(String(500))

    is_admin = Column(Boolean, default=False, nullable=False)
    role = Column(String(20), default=ROLE_CUSTOMER, nullable=False)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False)
    is_verified = Column(Boolean, default=False)
    preferences = Column(JSON, default=dict)

    last_login = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    reset_tokens = relationship("PasswordResetToken", back_populates="profile", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class PasswordResetToken(Base):
    """Six digit reset code mailed to the user; single use."""
    __tablename__ = "password_reset_tokens"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    token = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)

    profile = relationship("Profile", back_populates="reset_tokens")
