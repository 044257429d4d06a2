"""Endpoints and websocket handler for user notifications."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from markethub.application.use_cases.notifications import (
    NotificationService,
    get_notification_service,
    on_system_maintenance,
)
from markethub.config import get_settings
from markethub.domain.entities import (
    Notification,
    NotificationMetadata,
    NotificationOverrides,
    NotificationType,
    User,
)
from markethub.domain.exceptions import StorageError
from markethub.infrastructure.notifications import snapshot_message
from markethub.interfaces.api.dependencies import (
    get_current_user,
    require_admin,
    resolve_current_user,
)
from markethub.interfaces.api.schemas import (
    BroadcastRequest,
    BroadcastResponse,
    MaintenanceRequest,
    MaintenanceResponse,
    MarkAllReadResponse,
    NotificationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _store_unavailable(exc: StorageError) -> HTTPException:
    logger.error("Notification store error: %s", exc)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Notifications are temporarily unavailable",
    )


async def _get_owned_notification(
    service: NotificationService, notification_id: str, user: User
) -> Notification:
    """Return the notification only when ``user`` is its recipient."""

    try:
        notification = await service.get_notification(notification_id)
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    # Someone else's notification is reported as missing.
    if notification is None or notification.recipient_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.get("/", response_model=list[NotificationRead])
async def list_notifications(
    limit: int | None = Query(None, ge=1, le=200),
    unread_only: bool = False,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    try:
        notifications = await service.get_user_notifications(
            current_user.id,
            limit=limit or get_settings().notification_page_size,
            unread_only=unread_only,
        )
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    return [NotificationRead.from_entity(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
async def unread_count(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
) -> UnreadCountRead:
    try:
        count = await service.get_unread_count(current_user.id)
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    return UnreadCountRead(count=count)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
) -> MarkAllReadResponse:
    try:
        updated = await service.mark_all_as_read(current_user.id)
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    return MarkAllReadResponse(updated=updated)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
) -> Response:
    notification = await _get_owned_notification(service, notification_id, current_user)
    if not notification.is_unread:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    try:
        await service.mark_as_read(notification_id)
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(get_current_user),
) -> Response:
    await _get_owned_notification(service, notification_id, current_user)
    try:
        await service.delete_notification(notification_id)
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/broadcast", response_model=BroadcastResponse, status_code=status.HTTP_201_CREATED)
async def broadcast(
    payload: BroadcastRequest,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(require_admin),
) -> BroadcastResponse:
    """Send a custom system notification to every member of the selected roles."""

    overrides = NotificationOverrides(
        title=payload.title,
        message=payload.message,
        priority=payload.priority,
        metadata=NotificationMetadata(action_url="/admin/notifications"),
    )
    try:
        created = await service.create_role_notification(
            payload.target_roles, NotificationType.SYSTEM_MAINTENANCE, overrides
        )
    except StorageError as exc:
        raise _store_unavailable(exc) from exc
    logger.info(
        "Admin %s broadcast '%s' to %s (%d recipients)",
        current_user.id,
        payload.title,
        ", ".join(payload.target_roles),
        len(created),
    )
    return BroadcastResponse(recipients=len(created))


@router.post(
    "/maintenance", response_model=MaintenanceResponse, status_code=status.HTTP_202_ACCEPTED
)
async def announce_maintenance(
    payload: MaintenanceRequest,
    service: NotificationService = Depends(get_notification_service),
    current_user: User = Depends(require_admin),
) -> MaintenanceResponse:
    outcome = await on_system_maintenance(
        service, maintenance_date=payload.maintenance_date, duration=payload.duration
    )
    return MaintenanceResponse(delivered=outcome.delivered)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    service: NotificationService = Depends(get_notification_service),
) -> None:
    """Websocket endpoint that streams the user's notification feed."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user = resolve_current_user(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    async def push(notifications: list[Notification]) -> None:
        await websocket.send_json(snapshot_message(notifications))

    try:
        unsubscribe = await service.subscribe_to_notifications(
            user.id, push, limit=get_settings().notification_feed_size
        )
    except StorageError:
        logger.exception("Could not open the notification feed for user %s", user.id)
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (ValueError, KeyError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    await _acknowledge(service, user, ids)
                continue
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()


async def _acknowledge(service: NotificationService, user: User, ids: list[Any]) -> None:
    for notification_id in ids:
        if not isinstance(notification_id, str):
            continue
        try:
            notification = await service.get_notification(notification_id)
            if notification is None or notification.recipient_id != user.id:
                continue
            if notification.is_unread:
                await service.mark_as_read(notification_id)
        except StorageError:
            logger.exception("Could not acknowledge notification %s", notification_id)
