"""Domain entities exposed by the application."""

from .notification import (
    Notification,
    NotificationMetadata,
    NotificationOverrides,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from .user import ADMIN_ROLES, ALL_ROLES, MODERATION_ROLES, User

__all__ = [
    "ADMIN_ROLES",
    "ALL_ROLES",
    "MODERATION_ROLES",
    "Notification",
    "NotificationMetadata",
    "NotificationOverrides",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "User",
]
