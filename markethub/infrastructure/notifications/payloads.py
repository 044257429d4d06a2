"""Serialize notifications for websocket subscribers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from markethub.domain.entities import Notification
from markethub.domain.templates import get_template


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON representation pushed to realtime clients."""

    return {
        "id": notification.id,
        "recipient_id": notification.recipient_id,
        "recipient_role": notification.recipient_role,
        "type": notification.type.value,
        "icon": get_template(notification.type).icon,
        "title": notification.title,
        "message": notification.message,
        "priority": notification.priority.value,
        "status": notification.status.value,
        "metadata": notification.metadata.to_document(),
        "created_at": _iso_or_none(notification.created_at),
        "read_at": _iso_or_none(notification.read_at),
        "expires_at": _iso_or_none(notification.expires_at),
    }


def snapshot_message(notifications: Iterable[Notification]) -> dict[str, Any]:
    """Wrap the current feed for ``send_json``."""

    return {
        "type": "snapshot",
        "data": [serialize_notification(notification) for notification in notifications],
    }


def _iso_or_none(value) -> str | None:
    return value.isoformat() if value else None


__all__ = ["serialize_notification", "snapshot_message"]
