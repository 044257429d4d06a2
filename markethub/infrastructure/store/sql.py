"""Document store backed by SQLAlchemy ORM models."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import partial
from typing import Any, Callable, TypeVar
from uuid import uuid4

from anyio import to_thread
from sqlalchemy import DateTime, inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from markethub.domain.exceptions import StorageError
from markethub.infrastructure.database import Base
from markethub.infrastructure.models import NotificationModel, UserModel
from markethub.utils import ensure_app_naive_datetime, ensure_app_timezone

from .base import (
    NOTIFICATIONS,
    USERS,
    DocumentStore,
    Filter,
    OrderBy,
    Record,
    validate_filters,
)

_T = TypeVar("_T")

DEFAULT_COLLECTIONS: Mapping[str, type[Base]] = {
    NOTIFICATIONS: NotificationModel,
    USERS: UserModel,
}


class SqlDocumentStore(DocumentStore):
    """Map each collection to one ORM model, keyed by column name.

    Session work is blocking, so every operation runs in a worker thread and
    the change feed is published back on the event loop once the commit
    succeeded.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        collections: Mapping[str, type[Base]] | None = None,
    ) -> None:
        super().__init__()
        self._session_factory = session_factory
        self._collections = dict(collections or DEFAULT_COLLECTIONS)

    async def insert(self, collection: str, record: Record) -> str:
        created = await self._run(self._insert_sync, collection, record)
        await self._publish(collection, created)
        return created["id"]

    async def get(self, collection: str, document_id: str) -> Record | None:
        return await self._run(self._get_sync, collection, document_id)

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[Record]:
        validate_filters(filters)
        return await self._run(self._query_sync, collection, tuple(filters), order_by, limit)

    async def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        validate_filters(filters)
        return await self._run(self._count_sync, collection, tuple(filters))

    async def update(self, collection: str, document_id: str, changes: Record) -> None:
        before, after = await self._run(self._update_sync, collection, document_id, changes)
        await self._publish(collection, before, after)

    async def delete(self, collection: str, document_id: str) -> None:
        removed = await self._run(self._delete_sync, collection, document_id)
        if removed is not None:
            await self._publish(collection, removed)

    async def _run(self, func: Callable[..., _T], *args: Any) -> _T:
        try:
            return await to_thread.run_sync(partial(func, *args))
        except SQLAlchemyError as exc:
            raise StorageError(f"Database operation failed: {exc}") from exc

    def _insert_sync(self, collection: str, record: Record) -> Record:
        model_class = self._model(collection)
        values = dict(record)
        values["id"] = str(values.get("id") or uuid4().hex)
        with self._session_factory() as session:
            instance = model_class()
            self._apply(instance, values)
            session.add(instance)
            session.commit()
            session.refresh(instance)
            return self._to_record(instance)

    def _get_sync(self, collection: str, document_id: str) -> Record | None:
        with self._session_factory() as session:
            instance = session.get(self._model(collection), document_id)
            return self._to_record(instance) if instance is not None else None

    def _query_sync(
        self,
        collection: str,
        filters: tuple[Filter, ...],
        order_by: OrderBy | None,
        limit: int | None,
    ) -> list[Record]:
        model_class = self._model(collection)
        with self._session_factory() as session:
            query = self._filtered(session.query(model_class), model_class, filters)
            if order_by is not None:
                column = self._column(model_class, order_by[0])
                query = query.order_by(column.desc() if order_by[1] == "desc" else column.asc())
            if limit is not None:
                query = query.limit(max(limit, 0))
            return [self._to_record(instance) for instance in query.all()]

    def _count_sync(self, collection: str, filters: tuple[Filter, ...]) -> int:
        model_class = self._model(collection)
        with self._session_factory() as session:
            return self._filtered(session.query(model_class), model_class, filters).count()

    def _update_sync(
        self, collection: str, document_id: str, changes: Record
    ) -> tuple[Record, Record]:
        with self._session_factory() as session:
            instance = session.get(self._model(collection), document_id)
            if instance is None:
                msg = f"Document '{document_id}' not found in '{collection}'"
                raise StorageError(msg)
            before = self._to_record(instance)
            self._apply(instance, {k: v for k, v in changes.items() if k != "id"})
            session.add(instance)
            session.commit()
            session.refresh(instance)
            return before, self._to_record(instance)

    def _delete_sync(self, collection: str, document_id: str) -> Record | None:
        with self._session_factory() as session:
            instance = session.get(self._model(collection), document_id)
            if instance is None:
                return None
            removed = self._to_record(instance)
            session.delete(instance)
            session.commit()
            return removed

    def _model(self, collection: str) -> type[Base]:
        try:
            return self._collections[collection]
        except KeyError as exc:
            raise StorageError(f"Unknown collection '{collection}'") from exc

    def _filtered(
        self, query: Query, model_class: type[Base], filters: tuple[Filter, ...]
    ) -> Query:
        for field_name, operator, value in filters:
            column = self._column(model_class, field_name)
            if operator == "in":
                query = query.filter(column.in_(list(value)))
            elif value is None:
                query = query.filter(column.is_(None))
            else:
                query = query.filter(column == value)
        return query

    @staticmethod
    def _attributes(model_class: type[Base]) -> dict[str, Any]:
        """Return the mapped attributes keyed by database column name."""

        return {
            attribute.columns[0].name: attribute
            for attribute in sa_inspect(model_class).column_attrs
        }

    def _column(self, model_class: type[Base], field_name: str):
        attribute = self._attributes(model_class).get(field_name)
        if attribute is None:
            msg = f"Unknown field '{field_name}' for '{model_class.__tablename__}'"
            raise StorageError(msg)
        return getattr(model_class, attribute.key)

    def _apply(self, instance: Base, values: Record) -> None:
        attributes = self._attributes(type(instance))
        for field_name, value in values.items():
            attribute = attributes.get(field_name)
            if attribute is None:
                msg = f"Unknown field '{field_name}' for '{instance.__tablename__}'"
                raise StorageError(msg)
            if isinstance(attribute.columns[0].type, DateTime):
                value = ensure_app_naive_datetime(value)
            setattr(instance, attribute.key, value)

    def _to_record(self, instance: Base) -> Record:
        record: Record = {}
        for name, attribute in self._attributes(type(instance)).items():
            value = getattr(instance, attribute.key)
            if isinstance(attribute.columns[0].type, DateTime):
                value = ensure_app_timezone(value)
            record[name] = value
        return record


__all__ = ["DEFAULT_COLLECTIONS", "SqlDocumentStore"]
