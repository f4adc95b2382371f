"""Notification API endpoints — 4 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from tourney.auth.dependencies import get_current_user
from tourney.kv import KVStore, get_store
from tourney.models import UserProfile
from tourney.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from tourney.notifications.service import (
    get_notifications,
    get_unread_count,
    mark_all_as_read,
    mark_as_read,
)

router = APIRouter(prefix="/api/v1", tags=["Notifications"])


@router.get("/notifications", response_model=NotificationListResponse)
async def list_notifications(
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """List user's notifications, newest first."""
    notifications = await get_notifications(store, user.id)
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n.model_dump()) for n in notifications],
        total=len(notifications),
    )


@router.get("/notifications/unread-count", response_model=UnreadCountResponse)
async def get_unread_notification_count(
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """Get unread notification count."""
    count = await get_unread_count(store, user.id)
    return UnreadCountResponse(unread_count=count)


@router.patch("/notifications/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """Mark a notification as read."""
    notification = await mark_as_read(store, user.id, notification_id)
    return NotificationResponse.model_validate(notification.model_dump())


@router.post("/notifications/read-all", status_code=200)
async def mark_all_read(
    user: UserProfile = Depends(get_current_user),
    store: KVStore = Depends(get_store),
):
    """Mark all notifications as read."""
    count = await mark_all_as_read(store, user.id)
    return {"detail": f"Marked {count} notifications as read"}
