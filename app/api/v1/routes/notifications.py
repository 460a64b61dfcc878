# app/api/v1/routes/notifications.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID
import logging

from app.schemas.notification import NotificationRead, NotificationCreate
from app.crud import notification as crud_notification
from app.api import deps
from app.core.database import get_async_session
from app.core.auth import User

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

@router.get("", response_model=List[NotificationRead])
async def get_notifications(
    unread_only: bool = Query(False, description="Filter to only unread notifications"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of notifications to return"),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    """Get notifications for the current user, newest first"""
    return await crud_notification.get_notifications_for_user(
        db,
        user_id=current_user.id,
        unread_only=unread_only,
        limit=limit
    )

@router.get("/unread-count", response_model=int)
async def get_unread_count(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    return await crud_notification.get_unread_count(db, current_user.id)

@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification_in: NotificationCreate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    notification = await crud_notification.create_notification(db, current_user.id, notification_in)
    logger.info(f"Created {notification.type.value} notification for user {current_user.id}")
    return notification

@router.patch("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_as_read(
    notification_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    notification = await crud_notification.get_notification_by_id(db, notification_id, current_user.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return await crud_notification.mark_as_read(db, notification)

@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(deps.get_current_user)
):
    notification = await crud_notification.get_notification_by_id(db, notification_id, current_user.id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    await crud_notification.delete_notification(db, notification)
    return None
