"""Shared fixtures for the notification test-suite."""

from __future__ import annotations

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFICATION_STORE", "memory")

import pytest

from markethub.application.use_cases.notifications import NotificationService
from markethub.domain.entities import User
from markethub.domain.exceptions import StorageError
from markethub.infrastructure.store import InMemoryDocumentStore


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory store that fails writes for selected recipients or documents."""

    def __init__(self) -> None:
        super().__init__()
        self.failing_recipients: set[str] = set()
        self.failing_updates: set[str] = set()

    async def insert(self, collection, record):
        if record.get("recipient_id") in self.failing_recipients:
            raise StorageError("write rejected")
        return await super().insert(collection, record)

    async def update(self, collection, document_id, changes):
        if document_id in self.failing_updates:
            raise StorageError("update rejected")
        await super().update(collection, document_id, changes)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store() -> FlakyDocumentStore:
    return FlakyDocumentStore()


@pytest.fixture
def service(store: FlakyDocumentStore) -> NotificationService:
    return NotificationService(store)


@pytest.fixture
def directory(service: NotificationService):
    """Return a coroutine function that registers ``(id, role)`` pairs."""

    async def register(*members: tuple[str, str]) -> None:
        for user_id, role in members:
            await service.users.create(User(id=user_id, role=role, name=user_id.title()))

    return register
