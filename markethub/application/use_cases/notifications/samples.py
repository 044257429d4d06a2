"""Development helpers to reset and seed a user's notification feed."""

from __future__ import annotations

import logging

from markethub.domain.entities import NotificationType
from markethub.domain.exceptions import StorageError

from .service import NotificationService

logger = logging.getLogger(__name__)

_CLEAR_BATCH = 1000


async def clear_user_notifications(service: NotificationService, user_id: str) -> int:
    """Delete the notifications of ``user_id`` and return how many were removed.

    Deletions run one by one; a failing item is logged and skipped.
    """

    notifications = await service.get_user_notifications(user_id, limit=_CLEAR_BATCH)
    removed = 0
    for notification in notifications:
        try:
            await service.delete_notification(notification.id)
        except StorageError:
            logger.exception("Could not delete notification %s", notification.id)
            continue
        removed += 1
    logger.info("Cleared %d notifications for user %s", removed, user_id)
    return removed


async def create_sample_notifications(service: NotificationService, user_id: str) -> str:
    """Reset ``user_id``'s feed and leave a single welcome notification."""

    logger.warning("Creating sample notifications for user %s", user_id)
    await clear_user_notifications(service, user_id)
    return await service.create_notification(user_id, NotificationType.WELCOME)


__all__ = ["clear_user_notifications", "create_sample_notifications"]
