# app/schemas/notification.py
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List

from app.models.notification import NotificationType, NotificationChannel


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: NotificationType
    title: str
    message: str
    channel: NotificationChannel
    is_read: bool
    sent_at: datetime


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
