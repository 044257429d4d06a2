"""Notification service: templating, fan-out and read-state tracking."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Sequence
from functools import lru_cache
from typing import Any, Callable, TypeVar

from markethub.domain.entities import (
    ADMIN_ROLES,
    MODERATION_ROLES,
    Notification,
    NotificationMetadata,
    NotificationOverrides,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from markethub.domain.exceptions import BulkOperationError, StorageError
from markethub.domain.templates import get_template
from markethub.infrastructure.repositories import NotificationRepository, UserRepository
from markethub.infrastructure.store import DocumentStore, Unsubscribe, build_document_store
from markethub.utils import now_in_app_timezone

from .templating import render_placeholders

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

NotificationCallback = Callable[[list[Notification]], Any]


class NotificationService:
    """Create and manage notifications on top of a :class:`DocumentStore`.

    The service keeps no state of its own, so a single instance can be
    shared by every caller. Storage problems surface as
    :class:`StorageError`; fan-out operations report partial failures with
    :class:`BulkOperationError` after every sub-operation settled, leaving
    the successful writes in place.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.notifications = NotificationRepository(store)
        self.users = UserRepository(store)

    async def create_notification(
        self,
        recipient_id: str,
        notification_type: NotificationType | str,
        overrides: NotificationOverrides | None = None,
    ) -> str:
        """Build a notification from its template and persist it."""

        if not recipient_id:
            raise ValueError("recipient_id is required")

        notification = self._build(recipient_id, notification_type, overrides)
        saved = await self._storage(
            "create notification", self.notifications.create(notification)
        )
        return saved.id

    async def get_notification(self, notification_id: str) -> Notification | None:
        return await self._storage(
            "load notification", self.notifications.get(notification_id)
        )

    async def get_user_notifications(
        self,
        user_id: str,
        limit: int | None = 50,
        unread_only: bool = False,
    ) -> list[Notification]:
        """Return ``user_id``'s notifications, newest first.

        ``limit=None`` returns every matching notification.
        """

        notifications = await self._storage(
            "list notifications",
            self.notifications.list_for_recipient(
                user_id, limit=limit, unread_only=unread_only
            ),
        )
        return list(notifications)

    async def mark_as_read(self, notification_id: str) -> None:
        """Flag the notification as read; repeating the call is harmless."""

        await self._storage(
            "mark notification as read",
            self.notifications.mark_as_read(notification_id, read_at=now_in_app_timezone()),
        )

    async def mark_all_as_read(self, user_id: str) -> int:
        """Mark every unread notification of ``user_id`` as read.

        Updates run concurrently and are not transactional.
        """

        unread = await self.get_user_notifications(user_id, limit=None, unread_only=True)
        read_at = now_in_app_timezone()
        results = await asyncio.gather(
            *(
                self._storage(
                    "mark notification as read",
                    self.notifications.mark_as_read(notification.id, read_at=read_at),
                )
                for notification in unread
            ),
            return_exceptions=True,
        )
        updated = [
            notification.id
            for notification, result in zip(unread, results)
            if not isinstance(result, BaseException)
        ]
        self._raise_on_failures("mark as read", updated, results, total=len(unread))
        return len(updated)

    async def delete_notification(self, notification_id: str) -> None:
        await self._storage(
            "delete notification", self.notifications.delete(notification_id)
        )

    async def get_unread_count(self, user_id: str) -> int:
        return await self._storage(
            "count unread notifications", self.notifications.count_unread(user_id)
        )

    async def subscribe_to_notifications(
        self,
        user_id: str,
        callback: NotificationCallback,
        limit: int | None = 20,
    ) -> Unsubscribe:
        """Push ``user_id``'s latest ``limit`` notifications to ``callback``.

        ``callback`` receives the whole ordered list once immediately and
        again after every change that alters it. Call the returned handle to
        stop the feed.
        """

        return await self._storage(
            "subscribe to notifications",
            self.notifications.subscribe(user_id, callback, limit=limit),
        )

    async def create_bulk_notifications(
        self,
        recipient_ids: Sequence[str],
        notification_type: NotificationType | str,
        overrides: NotificationOverrides | None = None,
    ) -> list[str]:
        """Create one notification per recipient concurrently."""

        get_template(notification_type)
        recipients = list(recipient_ids)
        results = await asyncio.gather(
            *(
                self.create_notification(recipient_id, notification_type, overrides)
                for recipient_id in recipients
            ),
            return_exceptions=True,
        )
        created = [result for result in results if not isinstance(result, BaseException)]
        self._raise_on_failures(
            f"create '{NotificationType(notification_type).value}' notifications",
            created,
            results,
            total=len(recipients),
        )
        return created

    async def create_role_notification(
        self,
        target_roles: Iterable[str],
        notification_type: NotificationType | str,
        overrides: NotificationOverrides | None = None,
    ) -> list[str]:
        """Notify every user whose role is in ``target_roles`` at call time."""

        get_template(notification_type)
        roles = list(target_roles)
        recipient_ids = await self._storage(
            "resolve role members", self.users.list_ids_by_roles(roles)
        )
        if not recipient_ids:
            logger.info(
                "No users hold roles %s; skipping '%s' notification",
                roles,
                NotificationType(notification_type).value,
            )
            return []
        return await self.create_bulk_notifications(recipient_ids, notification_type, overrides)

    async def create_admin_notification(
        self,
        notification_type: NotificationType | str,
        overrides: NotificationOverrides | None = None,
    ) -> list[str]:
        return await self.create_role_notification(ADMIN_ROLES, notification_type, overrides)

    async def create_moderator_notification(
        self,
        notification_type: NotificationType | str,
        overrides: NotificationOverrides | None = None,
    ) -> list[str]:
        return await self.create_role_notification(
            MODERATION_ROLES, notification_type, overrides
        )

    @staticmethod
    def _build(
        recipient_id: str,
        notification_type: NotificationType | str,
        overrides: NotificationOverrides | None,
    ) -> Notification:
        template = get_template(notification_type)
        overrides = overrides or NotificationOverrides()
        metadata = overrides.metadata or NotificationMetadata()
        priority = (
            NotificationPriority(overrides.priority)
            if overrides.priority
            else template.priority
        )
        return Notification(
            id=None,
            recipient_id=recipient_id,
            type=NotificationType(notification_type),
            # Explicit text replaces the template outright instead of being rendered.
            title=overrides.title or render_placeholders(template.title, metadata),
            message=overrides.message or render_placeholders(template.message, metadata),
            priority=priority,
            status=NotificationStatus.UNREAD,
            recipient_role=overrides.recipient_role,
            metadata=metadata,
            created_at=now_in_app_timezone(),
            read_at=None,
            expires_at=overrides.expires_at,
        )

    @staticmethod
    async def _storage(action: str, operation: Awaitable[_T]) -> _T:
        try:
            return await operation
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError(f"Could not {action}: {exc}") from exc

    @staticmethod
    def _raise_on_failures(
        action: str,
        succeeded: Sequence[str],
        results: Sequence[object],
        *,
        total: int,
    ) -> None:
        failures = [result for result in results if isinstance(result, BaseException)]
        if not failures:
            return
        logger.warning(
            "Could not %s: %d of %d sub-operations failed", action, len(failures), total
        )
        raise BulkOperationError(
            f"Could not {action}: {len(failures)} of {total} failed",
            succeeded=succeeded,
            failures=failures,
        )


@lru_cache
def get_notification_service() -> NotificationService:
    """Return the process-wide service bound to the configured store."""

    return NotificationService(build_document_store())


__all__ = [
    "NotificationCallback",
    "NotificationService",
    "get_notification_service",
]
