"""Dictionary backed document store."""

from __future__ import annotations

import copy
from collections import defaultdict
from collections.abc import Sequence
from itertools import count as counter
from typing import Any, DefaultDict
from uuid import uuid4

from markethub.domain.exceptions import StorageError

from .base import DocumentStore, Filter, OrderBy, Record, matches, validate_filters


class InMemoryDocumentStore(DocumentStore):
    """Keep documents in process memory.

    Used by the test-suite and by deployments configured with
    ``NOTIFICATION_STORE=memory``. Operations never suspend between reading
    and writing a document, which gives the same per-document atomicity a
    real database provides.
    """

    def __init__(self) -> None:
        super().__init__()
        self._collections: DefaultDict[str, dict[str, Record]] = defaultdict(dict)
        self._sequence: dict[str, int] = {}
        self._next_sequence = counter()

    async def insert(self, collection: str, record: Record) -> str:
        document = copy.deepcopy(record)
        document_id = str(document.get("id") or uuid4().hex)
        documents = self._collections[collection]
        if document_id in documents:
            raise StorageError(f"Document '{document_id}' already exists in '{collection}'")
        document["id"] = document_id
        documents[document_id] = document
        self._sequence[document_id] = next(self._next_sequence)
        await self._publish(collection, copy.deepcopy(document))
        return document_id

    async def get(self, collection: str, document_id: str) -> Record | None:
        document = self._collections[collection].get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Record]:
        validate_filters(filters)
        found = [
            document
            for document in self._collections[collection].values()
            if matches(document, filters)
        ]
        if order_by is not None:
            found.sort(key=self._sort_key(order_by[0]), reverse=order_by[1] == "desc")
        if limit is not None:
            found = found[: max(limit, 0)]
        return [copy.deepcopy(document) for document in found]

    async def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        validate_filters(filters)
        return sum(
            1 for document in self._collections[collection].values() if matches(document, filters)
        )

    async def update(self, collection: str, document_id: str, changes: Record) -> None:
        documents = self._collections[collection]
        current = documents.get(document_id)
        if current is None:
            raise StorageError(f"Document '{document_id}' not found in '{collection}'")
        before = copy.deepcopy(current)
        current.update(copy.deepcopy({k: v for k, v in changes.items() if k != "id"}))
        await self._publish(collection, before, copy.deepcopy(current))

    async def delete(self, collection: str, document_id: str) -> None:
        removed = self._collections[collection].pop(document_id, None)
        self._sequence.pop(document_id, None)
        if removed is not None:
            await self._publish(collection, removed)

    def _sort_key(self, field_name: str):
        def key(document: Record) -> tuple[Any, ...]:
            value = document.get(field_name)
            # Missing values sort first ascending; insertion order breaks ties.
            return (value is not None, value, self._sequence.get(document["id"], 0))

        return key


__all__ = ["InMemoryDocumentStore"]
