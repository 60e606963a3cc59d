# juliecraft/schemas/notifications.py

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class NotificationOut(BaseModel):
    id: UUID
    recipient_type: str
    user_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationList(BaseModel):
    notifications: List[NotificationOut]
    unread_count: int
    total: int = 0


class NotificationUpdate(BaseModel):
    is_read: bool


class MarkAllRead(BaseModel):
    recipient_type: Literal["admin", "customer"] = "customer"
