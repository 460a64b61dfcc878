# app/models/notification.py
import enum
import uuid
from sqlalchemy import Column, String, Text, ForeignKey, Boolean, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timestamp import utcnow


class NotificationType(str, enum.Enum):
    info = "info"
    warning = "warning"
    success = "success"
    error = "error"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Enum(NotificationType, name="notification_type"), nullable=False, default=NotificationType.info)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    user = relationship("User", back_populates="notifications")
