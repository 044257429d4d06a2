"""Integration tests for the notification API and websocket feed."""

from __future__ import annotations

import anyio
import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from markethub.application.use_cases.notifications import (
    NotificationService,
    get_notification_service,
)
from markethub.domain.entities import (
    NotificationMetadata,
    NotificationOverrides,
    NotificationType,
    User,
)
from markethub.infrastructure.security import create_access_token
from markethub.infrastructure.store import InMemoryDocumentStore
from markethub.main import create_app


@pytest.fixture()
def notification_service() -> NotificationService:
    return NotificationService(InMemoryDocumentStore())


@pytest.fixture()
def client(notification_service):
    """Return a test client whose routes share ``notification_service``."""

    app = create_app()
    app.dependency_overrides[get_notification_service] = lambda: notification_service
    with TestClient(app) as test_client:
        yield test_client


def _auth(user_id: str, role: str = "customer") -> dict[str, str]:
    token = create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}


def _seed(service: NotificationService, recipient_id: str, count: int = 1) -> list[str]:
    async def create() -> list[str]:
        return [
            await service.create_notification(
                recipient_id,
                NotificationType.ORDER_SHIPPED,
                NotificationOverrides(metadata=NotificationMetadata(order_id=f"ORD-{index}")),
            )
            for index in range(count)
        ]

    return anyio.run(create)


def _register(service: NotificationService, *members: tuple[str, str]) -> None:
    async def create() -> None:
        for user_id, role in members:
            await service.users.create(User(id=user_id, role=role))

    anyio.run(create)


def test_list_notifications_returns_only_own_feed(client, notification_service):
    _seed(notification_service, "cust-1", 3)
    _seed(notification_service, "cust-2")

    response = client.get("/notifications/", headers=_auth("cust-1"))

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 3
    assert {item["recipient_id"] for item in body} == {"cust-1"}
    assert body[0]["icon"] == "🚚"
    assert body[0]["status"] == "unread"


def test_list_notifications_honours_limit(client, notification_service):
    _seed(notification_service, "cust-1", 3)

    response = client.get("/notifications/", params={"limit": 2}, headers=_auth("cust-1"))

    assert response.status_code == 200
    assert len(response.json()) == 2


def test_requests_without_token_are_rejected(client):
    response = client.get("/notifications/")

    assert response.status_code == 401


def test_requests_with_invalid_token_are_rejected(client):
    response = client.get(
        "/notifications/", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401


def test_mark_read_and_unread_count(client, notification_service):
    ids = _seed(notification_service, "cust-1", 2)
    headers = _auth("cust-1")

    assert client.get("/notifications/unread-count", headers=headers).json() == {"count": 2}

    response = client.post(f"/notifications/{ids[0]}/read", headers=headers)

    assert response.status_code == 204
    assert client.get("/notifications/unread-count", headers=headers).json() == {"count": 1}


def test_marking_read_twice_keeps_first_read_time(client, notification_service):
    [notification_id] = _seed(notification_service, "cust-1")
    headers = _auth("cust-1")

    assert client.post(f"/notifications/{notification_id}/read", headers=headers).status_code == 204
    [first] = client.get("/notifications/", headers=headers).json()
    assert client.post(f"/notifications/{notification_id}/read", headers=headers).status_code == 204
    [second] = client.get("/notifications/", headers=headers).json()

    assert first["status"] == second["status"] == "read"
    assert second["read_at"] == first["read_at"]


def test_other_users_notifications_are_not_found(client, notification_service):
    [notification_id] = _seed(notification_service, "cust-1")

    read_response = client.post(f"/notifications/{notification_id}/read", headers=_auth("cust-2"))
    delete_response = client.delete(f"/notifications/{notification_id}", headers=_auth("cust-2"))

    assert read_response.status_code == 404
    assert delete_response.status_code == 404
    assert client.get("/notifications/unread-count", headers=_auth("cust-1")).json() == {
        "count": 1
    }


def test_delete_notification(client, notification_service):
    [notification_id] = _seed(notification_service, "cust-1")
    headers = _auth("cust-1")

    response = client.delete(f"/notifications/{notification_id}", headers=headers)

    assert response.status_code == 204
    assert client.get("/notifications/", headers=headers).json() == []
    assert client.delete(f"/notifications/{notification_id}", headers=headers).status_code == 404


def test_read_all(client, notification_service):
    _seed(notification_service, "cust-1", 3)
    headers = _auth("cust-1")

    response = client.post("/notifications/read-all", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"updated": 3}
    assert client.get("/notifications/unread-count", headers=headers).json() == {"count": 0}


def test_broadcast_requires_admin(client):
    payload = {"title": "Hello", "message": "World", "target_roles": ["vendor"]}

    response = client.post("/notifications/broadcast", json=payload, headers=_auth("ven-1", "vendor"))

    assert response.status_code == 403


def test_broadcast_reaches_selected_roles(client, notification_service):
    _register(
        notification_service,
        ("ven-1", "vendor"),
        ("ven-2", "vendor"),
        ("cust-1", "customer"),
    )
    payload = {
        "title": "Fee update",
        "message": "Commission drops to 5% next month",
        "priority": "high",
        "target_roles": ["vendor", "vendor"],
    }

    response = client.post("/notifications/broadcast", json=payload, headers=_auth("adm-1", "admin"))

    assert response.status_code == 201
    assert response.json() == {"recipients": 2}
    [notification] = client.get("/notifications/", headers=_auth("ven-1", "vendor")).json()
    assert notification["title"] == "Fee update"
    assert notification["message"] == "Commission drops to 5% next month"
    assert notification["priority"] == "high"
    assert notification["metadata"] == {"action_url": "/admin/notifications"}
    assert client.get("/notifications/", headers=_auth("cust-1")).json() == []


def test_broadcast_rejects_unknown_roles(client):
    payload = {"title": "Hello", "message": "World", "target_roles": ["pirate"]}

    response = client.post("/notifications/broadcast", json=payload, headers=_auth("adm-1", "admin"))

    assert response.status_code == 422


def test_maintenance_announcement(client, notification_service):
    _register(notification_service, ("cust-1", "customer"), ("sup-1", "support"))

    response = client.post(
        "/notifications/maintenance",
        json={"maintenance_date": "2025-03-07", "duration": "2 hours"},
        headers=_auth("root", "super_admin"),
    )

    assert response.status_code == 202
    assert response.json() == {"delivered": True}
    [notification] = client.get("/notifications/", headers=_auth("sup-1", "support")).json()
    assert notification["message"] == (
        "Scheduled maintenance will begin on 3/7/2025 and last approximately 2 hours"
    )


def test_websocket_streams_snapshots_and_acknowledges(client, notification_service):
    ids = _seed(notification_service, "cust-1", 2)
    token = create_access_token({"sub": "cust-1", "role": "customer"})

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        initial = websocket.receive_json()
        assert initial["type"] == "snapshot"
        assert [item["id"] for item in initial["data"]] == list(reversed(ids))

        websocket.send_json({"type": "ack", "ids": [ids[0]]})
        updated = websocket.receive_json()
        statuses = {item["id"]: item["status"] for item in updated["data"]}
        assert statuses == {ids[0]: "read", ids[1]: "unread"}

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert notification_service.store.subscriber_count("notifications") == 0


def test_websocket_ignores_acks_for_foreign_notifications(client, notification_service):
    [foreign_id] = _seed(notification_service, "cust-2")
    token = create_access_token({"sub": "cust-1", "role": "customer"})

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        assert websocket.receive_json() == {"type": "snapshot", "data": []}
        websocket.send_json({"type": "ack", "ids": [foreign_id]})
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert client.get("/notifications/unread-count", headers=_auth("cust-2")).json() == {
        "count": 1
    }


def test_websocket_rejects_invalid_token(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/notifications/ws?token=bogus") as websocket:
            websocket.receive_json()

    assert exc_info.value.code == 1008
