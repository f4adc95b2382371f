"""Notification creation and read-state service.

Notifications are durable records under notification:{user_id}:{id}. There is
no push or email delivery; clients poll the list and unread count.

Types: tournament_start, registration_closing, match_start, xp_earned,
level_up, team_invite
"""

from __future__ import annotations

from typing import Any, get_args

import structlog

from tourney.exceptions import NotFoundError
from tourney.kv import KVStore, keys
from tourney.models import Notification, NotificationType

logger = structlog.get_logger()

VALID_TYPES = frozenset(get_args(NotificationType))


async def create_notification(
    store: KVStore,
    user_id: str,
    type_: str,
    title: str,
    message: str,
    data: dict[str, Any] | None = None,
) -> Notification:
    """Create and persist a notification."""
    if type_ not in VALID_TYPES:
        raise ValueError(f"Invalid notification type: {type_}. Must be one of {sorted(VALID_TYPES)}")

    notification = Notification(
        user_id=user_id,
        type=type_,
        title=title,
        message=message,
        data=data or {},
    )
    await store.set(keys.notification(user_id, notification.id), notification.to_document())
    logger.debug("notification_created", user_id=user_id, type=type_, notification_id=notification.id)
    return notification


async def get_notifications(store: KVStore, user_id: str) -> list[Notification]:
    """Get user's notifications, most recent first."""
    docs = await store.get_by_prefix(keys.notifications(user_id))
    notifications = [Notification.model_validate(d) for d in docs]
    notifications.sort(key=lambda n: n.created_at, reverse=True)
    return notifications


async def mark_as_read(store: KVStore, user_id: str, notification_id: str) -> Notification:
    """Mark a single notification as read."""
    key = keys.notification(user_id, notification_id)
    doc = await store.get(key)
    if doc is None:
        raise NotFoundError("Notification not found")

    notification = Notification.model_validate(doc)
    if not notification.read:
        notification.read = True
        await store.set(key, notification.to_document())
    return notification


async def mark_all_as_read(store: KVStore, user_id: str) -> int:
    """Mark all unread notifications as read. Returns count updated."""
    count = 0
    for notification in await get_notifications(store, user_id):
        if notification.read:
            continue
        notification.read = True
        await store.set(keys.notification(user_id, notification.id), notification.to_document())
        count += 1
    return count


async def get_unread_count(store: KVStore, user_id: str) -> int:
    """Get count of unread notifications."""
    docs = await store.get_by_prefix(keys.notifications(user_id))
    return sum(1 for d in docs if not d.get("read", False))
