from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from fechou.models.enums.notification_type import NotificationType


class NotificationOut(BaseModel):
    id: int
    title: str
    message: str
    type: NotificationType
    data: Optional[dict]
    is_read: bool
    read_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListData(BaseModel):
    total: int
    unread: int
    items: List[NotificationOut]


class UnreadCountOut(BaseModel):
    unread: int


class MarkAllReadOut(BaseModel):
    updated: int
