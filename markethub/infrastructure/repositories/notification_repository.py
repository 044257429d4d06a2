"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Callable

from markethub.domain.entities import (
    Notification,
    NotificationMetadata,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from markethub.infrastructure.store import (
    NOTIFICATIONS,
    DocumentStore,
    Filter,
    Record,
    Unsubscribe,
)
from markethub.utils import ensure_app_timezone

_NEWEST_FIRST = ("created_at", "desc")


class NotificationRepository:
    """Read and write :class:`Notification` objects in the ``notifications`` collection."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def create(self, notification: Notification) -> Notification:
        document = self._to_document(notification)
        document.pop("id", None)
        notification_id = await self.store.insert(NOTIFICATIONS, document)
        notification.id = notification_id
        return notification

    async def get(self, notification_id: str) -> Notification | None:
        document = await self.store.get(NOTIFICATIONS, notification_id)
        return self._to_entity(document) if document is not None else None

    async def list_for_recipient(
        self,
        recipient_id: str,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        documents = await self.store.query(
            NOTIFICATIONS,
            self._recipient_filters(recipient_id, unread_only=unread_only),
            _NEWEST_FIRST,
            limit,
        )
        return [self._to_entity(document) for document in documents]

    async def count_unread(self, recipient_id: str) -> int:
        return await self.store.count(
            NOTIFICATIONS, self._recipient_filters(recipient_id, unread_only=True)
        )

    async def mark_as_read(self, notification_id: str, *, read_at: datetime) -> None:
        await self.store.update(
            NOTIFICATIONS,
            notification_id,
            {"status": NotificationStatus.READ.value, "read_at": read_at},
        )

    async def delete(self, notification_id: str) -> None:
        await self.store.delete(NOTIFICATIONS, notification_id)

    async def subscribe(
        self,
        recipient_id: str,
        callback: Callable[[list[Notification]], Any],
        *,
        limit: int | None = 20,
    ) -> Unsubscribe:
        def on_change(documents: list[Record]) -> Any:
            return callback([self._to_entity(document) for document in documents])

        return await self.store.subscribe(
            NOTIFICATIONS,
            self._recipient_filters(recipient_id),
            _NEWEST_FIRST,
            limit,
            on_change,
        )

    @staticmethod
    def _recipient_filters(recipient_id: str, *, unread_only: bool = False) -> list[Filter]:
        filters: list[Filter] = [("recipient_id", "==", recipient_id)]
        if unread_only:
            filters.append(("status", "==", NotificationStatus.UNREAD.value))
        return filters

    @staticmethod
    def _to_document(notification: Notification) -> Record:
        return {
            "id": notification.id,
            "recipient_id": notification.recipient_id,
            "recipient_role": notification.recipient_role,
            "type": NotificationType(notification.type).value,
            "title": notification.title,
            "message": notification.message,
            "priority": NotificationPriority(notification.priority).value,
            "status": NotificationStatus(notification.status).value,
            "metadata": notification.metadata.to_document(),
            "created_at": notification.created_at,
            "read_at": notification.read_at,
            "expires_at": notification.expires_at,
        }

    @staticmethod
    def _to_entity(document: Record) -> Notification:
        return Notification(
            id=document["id"],
            recipient_id=document["recipient_id"],
            type=NotificationType(document["type"]),
            title=document["title"],
            message=document["message"],
            priority=NotificationPriority(document["priority"]),
            status=NotificationStatus(document.get("status") or NotificationStatus.UNREAD),
            recipient_role=document.get("recipient_role"),
            metadata=NotificationMetadata.from_document(document.get("metadata")),
            created_at=ensure_app_timezone(document.get("created_at")),
            read_at=ensure_app_timezone(document.get("read_at")),
            expires_at=ensure_app_timezone(document.get("expires_at")),
        )


__all__ = ["NotificationRepository"]
