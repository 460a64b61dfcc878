# app/schemas/notification.py
from pydantic import BaseModel, Field
from datetime import datetime
import uuid

from app.models.notification import NotificationType

class NotificationBase(BaseModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.info

class NotificationCreate(NotificationBase):
    pass

class NotificationRead(NotificationBase):
    id: uuid.UUID
    user_id: uuid.UUID
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
