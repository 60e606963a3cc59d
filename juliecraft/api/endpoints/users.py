# juliecraft/api/endpoints/users.py
# type: ignore

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import require_admin
from juliecraft.core.errors import AuthorizationError, NotFoundError, ValidationError
from juliecraft.core.permissions import AdminLevel, Authorized
from juliecraft.database import get_db
from juliecraft.models.auth import (
    Profile,
    ROLE_ADMIN,
    ROLE_SUPER_ADMIN,
    ROLES,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from juliecraft.schemas.admin import UserAdminUpdate, UserList
from juliecraft.schemas.auth import ProfileOut

logger = logging.getLogger(__name__)

router = APIRouter()


# ***************************************************************
# 1. List users (GET /api/admin/users/)
# ***************************************************************
@router.get("/", response_model=UserList)
def read_users(
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
    search: Optional[str] = Query(None, description="Match on email or name"),
    role: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
):
    query = db.query(Profile)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Profile.email.ilike(pattern),
            Profile.first_name.ilike(pattern),
            Profile.last_name.ilike(pattern),
        ))
    if role:
        query = query.filter(Profile.role == role)
    if status:
        query = query.filter(Profile.status == status)

    total = query.count()
    users = query.order_by(Profile.created_at.desc()).offset(offset).limit(limit).all()
    return {"users": users, "total": total}


# ***************************************************************
# 2. Read one user (GET /api/admin/users/{user_id})
# ***************************************************************
@router.get("/{user_id}", response_model=ProfileOut)
def read_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    user = db.get(Profile, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


# ***************************************************************
# 3. Update a user (PATCH /api/admin/users/{user_id})
# ***************************************************************
@router.patch("/{user_id}", response_model=ProfileOut)
def update_user(
    user_id: UUID,
    user_in: UserAdminUpdate,
    db: Session = Depends(get_db),
    admin: Authorized = Depends(require_admin),
):
    """
    Any admin may rename and (de)activate customer accounts. Other admin
    accounts, roles and the admin flag are for super admins only.
    """
    user = db.get(Profile, user_id)
    if user is None:
        raise NotFoundError("User not found")

    update_data = user_in.model_dump(exclude_unset=True)

    # 1. Only a super admin may touch another admin account
    target_is_privileged = user.is_admin or user.role in (ROLE_ADMIN, ROLE_SUPER_ADMIN)
    if target_is_privileged and user.id != admin.caller.id and admin.level < AdminLevel.SUPER_ADMIN:
        raise AuthorizationError("Forbidden - Super admin access required")

    # 2. Privilege changes
    if "role" in update_data or "is_admin" in update_data:
        if admin.level < AdminLevel.SUPER_ADMIN:
            raise AuthorizationError("Forbidden - Super admin access required")
        if user_in.role is not None and user_in.role not in ROLES:
            raise ValidationError(f"Invalid role: {user_in.role}")

    # 3. Status changes (profiles are never deleted)
    if user_in.status is not None:
        if user_in.status not in (STATUS_ACTIVE, STATUS_INACTIVE):
            raise ValidationError(f"Invalid status: {user_in.status}")
        if user.id == admin.caller.id and user_in.status == STATUS_INACTIVE:
            raise ValidationError("You cannot deactivate your own account")

    for key, value in update_data.items():
        if value is not None:
            setattr(user, key, value)

    db.commit()
    db.refresh(user)

    logger.info("User %s updated by %s: %s", user.email, admin.caller.email, sorted(update_data))
    return user
