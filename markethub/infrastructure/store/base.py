"""Abstract document store consumed by the notification core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Callable

from .feed import ChangeFeed, SnapshotCallback, Unsubscribe

Record = dict[str, Any]
Filter = tuple[str, str, Any]
OrderBy = tuple[str, str]

NOTIFICATIONS = "notifications"
USERS = "users"

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda actual, expected: actual == expected,
    "in": lambda actual, expected: actual in expected,
}


def validate_filters(filters: Sequence[Filter]) -> None:
    """Raise ``ValueError`` for operators the stores do not understand."""

    for field_name, operator, _ in filters:
        if operator not in _OPERATORS:
            msg = f"Unsupported filter operator {operator!r} on field {field_name!r}"
            raise ValueError(msg)


def matches(record: Record | None, filters: Sequence[Filter]) -> bool:
    """Return ``True`` when ``record`` satisfies every filter."""

    if record is None:
        return False
    return all(
        _OPERATORS[operator](record.get(field_name), value)
        for field_name, operator, value in filters
    )


class DocumentStore(ABC):
    """Collection-oriented persistence with a change feed.

    Each single-document write is atomic; nothing spans documents. Writers
    publish to the feed once their change is durable so subscribers always
    re-read committed state.
    """

    def __init__(self) -> None:
        self._feed = ChangeFeed()

    @abstractmethod
    async def insert(self, collection: str, record: Record) -> str:
        """Persist ``record`` and return its identifier."""

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Record | None:
        """Return the document or ``None`` when it does not exist."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Record]:
        """Return the matching documents in the requested order."""

    @abstractmethod
    async def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        """Return how many documents match ``filters``."""

    @abstractmethod
    async def update(self, collection: str, document_id: str, changes: Record) -> None:
        """Merge ``changes`` into an existing document."""

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Remove the document; missing documents are ignored."""

    async def subscribe(
        self,
        collection: str,
        filters: Sequence[Filter],
        order_by: OrderBy | None,
        limit: int | None,
        on_change: SnapshotCallback,
    ) -> Unsubscribe:
        """Push the current result set to ``on_change`` now and after every change.

        Returns a handle that detaches the listener.
        """

        validate_filters(filters)
        filters = tuple(filters)

        async def snapshot() -> list[Record]:
            return await self.query(collection, filters, order_by, limit)

        return await self._feed.listen(
            collection,
            snapshot=snapshot,
            is_relevant=lambda record: matches(record, filters),
            callback=on_change,
        )

    async def wait_for_subscribers(self) -> None:
        """Return once every pending subscription refresh has been delivered."""

        await self._feed.drain()

    def subscriber_count(self, collection: str) -> int:
        return self._feed.listener_count(collection)

    async def _publish(self, collection: str, *records: Record | None) -> None:
        await self._feed.publish(collection, records)


__all__ = [
    "DocumentStore",
    "Filter",
    "NOTIFICATIONS",
    "OrderBy",
    "Record",
    "USERS",
    "matches",
    "validate_filters",
]
