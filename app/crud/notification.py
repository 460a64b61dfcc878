# app/crud/notification.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, func
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate
from typing import List, Optional
import uuid

async def create_notification(db: AsyncSession, user_id: uuid.UUID, notification: NotificationCreate) -> Notification:
    """Create a new notification"""
    db_notification = Notification(**notification.model_dump(), user_id=user_id)
    db.add(db_notification)
    await db.commit()
    await db.refresh(db_notification)
    return db_notification

async def get_notification_by_id(db: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Notification]:
    """Get a specific notification owned by the user"""
    result = await db.execute(
        select(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
    )
    return result.scalars().first()

async def get_notifications_for_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = 50
) -> List[Notification]:
    """Get notifications for a specific user with filtering options"""
    query = (
        select(Notification)
        .filter(Notification.user_id == user_id)
    )

    if unread_only:
        query = query.filter(Notification.is_read.is_(False))

    query = query.order_by(desc(Notification.created_at)).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()

async def get_unread_count(db: AsyncSession, user_id: uuid.UUID) -> int:
    """Get count of unread notifications for a user"""
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
    )
    return result.scalar_one() or 0

async def mark_as_read(db: AsyncSession, notification: Notification) -> Notification:
    notification.is_read = True
    db.add(notification)
    await db.commit()
    await db.refresh(notification)
    return notification

async def delete_notification(db: AsyncSession, notification: Notification) -> None:
    await db.delete(notification)
    await db.commit()
