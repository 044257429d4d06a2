"""Document store backends used to persist notifications."""

from __future__ import annotations

import logging

from markethub.config import Settings, get_settings

from .base import NOTIFICATIONS, USERS, DocumentStore, Filter, OrderBy, Record
from .feed import ChangeFeed, SnapshotCallback, Unsubscribe
from .memory import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def build_document_store(settings: Settings | None = None) -> DocumentStore:
    """Return the backend selected by ``NOTIFICATION_STORE``."""

    settings = settings or get_settings()
    if settings.notification_store == "memory":
        logger.warning("Notifications are kept in memory and will not survive a restart.")
        return InMemoryDocumentStore()

    from markethub.infrastructure.database import SessionLocal, initialize_database

    from .sql import SqlDocumentStore

    initialize_database()
    return SqlDocumentStore(SessionLocal)


__all__ = [
    "ChangeFeed",
    "DocumentStore",
    "Filter",
    "InMemoryDocumentStore",
    "NOTIFICATIONS",
    "OrderBy",
    "Record",
    "SnapshotCallback",
    "USERS",
    "Unsubscribe",
    "build_document_store",
]
