"""Tests for the SQLAlchemy-backed document store."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from markethub.application.use_cases.notifications import NotificationService
from markethub.domain.entities import (
    NotificationMetadata,
    NotificationOverrides,
    NotificationStatus,
    NotificationType,
    User,
)
from markethub.domain.exceptions import StorageError
from markethub.infrastructure.database import build_engine, initialize_database
from markethub.infrastructure.store import NOTIFICATIONS, USERS
from markethub.infrastructure.store.sql import SqlDocumentStore
from markethub.utils import get_app_timezone

pytestmark = pytest.mark.anyio


@pytest.fixture
def sql_store(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'notifications.db'}")
    initialize_database(engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield SqlDocumentStore(session_factory)
    engine.dispose()


def _record(recipient_id: str, created_at: datetime, **extra) -> dict:
    record = {
        "recipient_id": recipient_id,
        "type": NotificationType.WELCOME.value,
        "title": "Welcome to MarketHub!",
        "message": "Welcome to Nigeria's premier e-commerce platform",
        "priority": "medium",
        "status": "unread",
        "metadata": {},
        "created_at": created_at,
    }
    record.update(extra)
    return record


async def test_insert_and_get_round_trip_metadata_and_timezone(sql_store):
    created_at = datetime(2025, 1, 5, 9, 30, tzinfo=get_app_timezone())

    document_id = await sql_store.insert(
        NOTIFICATIONS,
        _record("cust-1", created_at, metadata={"order_id": "ORD-1", "amount": 2500}),
    )
    document = await sql_store.get(NOTIFICATIONS, document_id)

    assert document["id"] == document_id
    assert document["metadata"] == {"order_id": "ORD-1", "amount": 2500}
    assert document["created_at"] == created_at
    assert document["created_at"].tzinfo is not None
    assert document["read_at"] is None


async def test_get_missing_document_returns_none(sql_store):
    assert await sql_store.get(NOTIFICATIONS, "missing") is None


async def test_query_filters_orders_and_limits(sql_store):
    base = datetime(2025, 1, 1, tzinfo=get_app_timezone())
    for offset in range(4):
        await sql_store.insert(
            NOTIFICATIONS, _record("cust-1", base + timedelta(minutes=offset), title=f"n{offset}")
        )
    await sql_store.insert(NOTIFICATIONS, _record("cust-2", base + timedelta(hours=1)))

    documents = await sql_store.query(
        NOTIFICATIONS, [("recipient_id", "==", "cust-1")], ("created_at", "desc"), 3
    )

    assert [document["title"] for document in documents] == ["n3", "n2", "n1"]
    assert await sql_store.count(NOTIFICATIONS, [("recipient_id", "==", "cust-1")]) == 4


async def test_in_filter_on_roles(sql_store):
    for user_id, role in (("a", "admin"), ("s", "super_admin"), ("c", "customer")):
        await sql_store.insert(USERS, {"id": user_id, "role": role, "name": user_id})

    documents = await sql_store.query(USERS, [("role", "in", ["admin", "super_admin"])])

    assert sorted(document["id"] for document in documents) == ["a", "s"]


async def test_update_and_delete(sql_store):
    now = datetime(2025, 2, 1, 12, 0, tzinfo=get_app_timezone())
    document_id = await sql_store.insert(NOTIFICATIONS, _record("cust-1", now))

    await sql_store.update(
        NOTIFICATIONS, document_id, {"status": "read", "read_at": now + timedelta(minutes=5)}
    )
    updated = await sql_store.get(NOTIFICATIONS, document_id)
    await sql_store.delete(NOTIFICATIONS, document_id)
    await sql_store.delete(NOTIFICATIONS, document_id)

    assert updated["status"] == "read"
    assert updated["read_at"] == now + timedelta(minutes=5)
    assert await sql_store.get(NOTIFICATIONS, document_id) is None


async def test_update_missing_document_raises(sql_store):
    with pytest.raises(StorageError):
        await sql_store.update(NOTIFICATIONS, "missing", {"status": "read"})


async def test_unknown_field_raises(sql_store):
    with pytest.raises(StorageError):
        await sql_store.query(NOTIFICATIONS, [("colour", "==", "red")])


async def test_unknown_collection_raises(sql_store):
    with pytest.raises(StorageError):
        await sql_store.get("orders", "o-1")


async def test_subscribe_receives_snapshots(sql_store):
    snapshots = []
    base = datetime(2025, 1, 1, tzinfo=get_app_timezone())

    unsubscribe = await sql_store.subscribe(
        NOTIFICATIONS,
        [("recipient_id", "==", "cust-1")],
        ("created_at", "desc"),
        10,
        snapshots.append,
    )
    first = await sql_store.insert(NOTIFICATIONS, _record("cust-1", base))
    await sql_store.insert(NOTIFICATIONS, _record("cust-2", base))
    await sql_store.wait_for_subscribers()
    unsubscribe()
    await sql_store.insert(NOTIFICATIONS, _record("cust-1", base + timedelta(minutes=1)))
    await sql_store.wait_for_subscribers()

    assert len(snapshots) == 2
    assert snapshots[0] == []
    assert [document["id"] for document in snapshots[1]] == [first]


async def test_service_over_sql_store(sql_store):
    service = NotificationService(sql_store)
    await service.users.create(User(id="adm-1", role="admin", name="Admin"))
    await service.users.create(User(id="cust-1", role="customer", name="Ada"))

    notification_id = await service.create_notification(
        "cust-1",
        NotificationType.ORDER_SHIPPED,
        NotificationOverrides(metadata=NotificationMetadata(order_id="ORD-9")),
    )
    created = await service.create_admin_notification(NotificationType.ABUSE_REPORT_FILED)
    await service.mark_as_read(notification_id)

    [notification] = await service.get_user_notifications("cust-1")
    assert notification.message == "Your order #ORD-9 has been shipped"
    assert notification.metadata.order_id == "ORD-9"
    assert notification.status == NotificationStatus.READ
    assert notification.read_at is not None
    assert len(created) == 1
    assert await service.get_unread_count("adm-1") == 1
    assert await service.get_unread_count("cust-1") == 0
