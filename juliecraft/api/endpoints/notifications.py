# juliecraft/api/endpoints/notifications.py

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import get_current_user, get_optional_user
from juliecraft.core.errors import AuthorizationError, NotFoundError
from juliecraft.core.permissions import AuthenticatedCaller, Authorized, check_admin_capability
from juliecraft.database import get_db
from juliecraft.models.auth import Profile
from juliecraft.models.notifications import Notification, RECIPIENT_ADMIN, RECIPIENT_CUSTOMER
from juliecraft.schemas.auth import MessageResponse
from juliecraft.schemas.notifications import (
    MarkAllRead,
    NotificationList,
    NotificationOut,
    NotificationUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def create_notification(
    db: Session,
    recipient_type: str,
    type: str,
    title: str,
    message: str,
    user_id: Optional[UUID] = None,
    order_id: Optional[UUID] = None,
    data: Optional[dict] = None,
) -> Notification:
    """Adds a notification to the session; the caller commits."""
    notification = Notification(
        recipient_type=recipient_type,
        user_id=user_id if recipient_type == RECIPIENT_CUSTOMER else None,
        order_id=order_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
    )
    db.add(notification)
    return notification


def _is_admin(db: Session, caller: AuthenticatedCaller) -> bool:
    return isinstance(check_admin_capability(db.get(Profile, caller.id)), Authorized)


def _scope_query(db: Session, recipient_type: str, caller: AuthenticatedCaller):
    """Notifications the caller may see for this recipient type."""
    query = db.query(Notification).filter(Notification.recipient_type == recipient_type)
    if recipient_type == RECIPIENT_ADMIN:
        if not _is_admin(db, caller):
            raise AuthorizationError("Forbidden - Admin access required")
        return query.filter(Notification.user_id.is_(None))
    return query.filter(Notification.user_id == caller.id)


def _get_owned_notification(db: Session, notification_id: UUID, caller: AuthenticatedCaller) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")

    if notification.recipient_type == RECIPIENT_CUSTOMER:
        if notification.user_id != caller.id:
            raise AuthorizationError("Unauthorized")
    elif not _is_admin(db, caller):
        raise AuthorizationError("Forbidden - Admin access required")

    return notification


# ***************************************************************
# 1. List (GET /)
# ***************************************************************
@router.get("/", response_model=NotificationList)
def list_notifications(
    recipient_type: str = Query(RECIPIENT_CUSTOMER, pattern="^(admin|customer)$"),
    limit: int = Query(50, gt=0, le=200),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
    caller: Optional[AuthenticatedCaller] = Depends(get_optional_user),
):
    """Newest first. Guests have no notifications."""
    if caller is None:
        if recipient_type == RECIPIENT_ADMIN:
            raise AuthorizationError("Forbidden - Admin access required")
        return {"notifications": [], "unread_count": 0, "total": 0}

    query = _scope_query(db, recipient_type, caller)
    unread_count = query.filter(Notification.is_read.is_(False)).count()

    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    total = query.count()

    notifications = (
        query.order_by(Notification.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return {"notifications": notifications, "unread_count": unread_count, "total": total}


# ***************************************************************
# 2. Mark all as read (POST /mark-all-read)
# ***************************************************************
@router.post("/mark-all-read", response_model=MessageResponse)
def mark_all_read(
    body: MarkAllRead,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    updated = (
        _scope_query(db, body.recipient_type, caller)
        .filter(Notification.is_read.is_(False))
        .update(
            {Notification.is_read: True, Notification.read_at: datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )
    db.commit()
    return {"success": True, "message": f"Marked {updated} notifications as read"}


# ***************************************************************
# 3. Mark one (PATCH /{notification_id})
# ***************************************************************
@router.patch("/{notification_id}", response_model=NotificationOut)
def update_notification(
    notification_id: UUID,
    body: NotificationUpdate,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    notification = _get_owned_notification(db, notification_id, caller)

    notification.is_read = body.is_read
    notification.read_at = datetime.now(timezone.utc) if body.is_read else None
    db.commit()
    db.refresh(notification)
    return notification


# ***************************************************************
# 4. Delete (DELETE /{notification_id})
# ***************************************************************
@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    notification = _get_owned_notification(db, notification_id, caller)
    db.delete(notification)
    db.commit()
    return {"success": True, "message": "Notification deleted successfully"}
