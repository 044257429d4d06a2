"""Aggregate application use cases."""

from .notifications import NotificationService, get_notification_service

__all__ = [
    "NotificationService",
    "get_notification_service",
]
