"""In-process change feed used to implement document store subscriptions."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Iterable
from typing import Any, Callable, DefaultDict, Set

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list[dict[str, Any]]], Any]
Unsubscribe = Callable[[], None]


class _Listener:
    """A standing query registered on one collection."""

    def __init__(
        self,
        snapshot: Callable[[], Awaitable[list[dict[str, Any]]]],
        is_relevant: Callable[[dict[str, Any] | None], bool],
        callback: SnapshotCallback,
    ) -> None:
        self.snapshot = snapshot
        self.is_relevant = is_relevant
        self.callback = callback
        self.active = True
        self.last: list[dict[str, Any]] | None = None
        self.started = 0
        self.delivered = 0
        self.dirty = False
        self.worker: asyncio.Task | None = None


class ChangeFeed:
    """Keep subscription listeners grouped by collection and notify them.

    Every listener receives the full current result of its query, never a
    diff, and only when that result differs from the last one delivered.
    Writers only schedule the refresh: each listener is served by its own
    background task, so a slow subscriber delays nobody but itself.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, Set[_Listener]] = defaultdict(set)
        self._workers: Set[asyncio.Task] = set()

    async def listen(
        self,
        collection: str,
        *,
        snapshot: Callable[[], Awaitable[list[dict[str, Any]]]],
        is_relevant: Callable[[dict[str, Any] | None], bool],
        callback: SnapshotCallback,
    ) -> Unsubscribe:
        """Register a listener, deliver its first snapshot and return a detach handle."""

        listener = _Listener(snapshot, is_relevant, callback)
        self._listeners[collection].add(listener)

        def unsubscribe() -> None:
            listener.active = False
            self._discard(collection, listener)
            worker = listener.worker
            if worker is not None and not worker.done() and worker is not _current_task():
                worker.cancel()

        try:
            await self._refresh(listener)
        except Exception:
            unsubscribe()
            raise
        return unsubscribe

    async def publish(
        self, collection: str, records: Iterable[dict[str, Any] | None]
    ) -> None:
        """Schedule a refresh of every listener of ``collection`` affected by ``records``."""

        changed = [record for record in records if record is not None]
        for listener in list(self._listeners.get(collection, ())):
            if not listener.active:
                continue
            if not any(listener.is_relevant(record) for record in changed):
                continue
            listener.dirty = True
            if listener.worker is None or listener.worker.done():
                listener.worker = asyncio.get_running_loop().create_task(
                    self._serve(collection, listener)
                )
                self._workers.add(listener.worker)
                listener.worker.add_done_callback(self._workers.discard)

    async def drain(self) -> None:
        """Wait until every scheduled refresh has been delivered."""

        while self._workers:
            await asyncio.gather(*list(self._workers), return_exceptions=True)

    def listener_count(self, collection: str) -> int:
        """Return the number of active listeners on ``collection``."""

        return len(self._listeners.get(collection, ()))

    async def _serve(self, collection: str, listener: _Listener) -> None:
        # Writes that land while a refresh runs collapse into one more pass.
        while listener.active and listener.dirty:
            listener.dirty = False
            try:
                await self._refresh(listener)
            except Exception:
                logger.exception("Could not refresh a subscription on '%s'", collection)

    async def _refresh(self, listener: _Listener) -> None:
        listener.started += 1
        version = listener.started
        rows = await listener.snapshot()
        # A slower refresh that started earlier must not overwrite a newer one.
        if not listener.active or version < listener.delivered:
            return
        listener.delivered = version
        if rows == listener.last:
            return
        listener.last = rows
        try:
            result = listener.callback(rows)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Subscription callback raised; the listener stays attached")

    def _discard(self, collection: str, listener: _Listener) -> None:
        listeners = self._listeners.get(collection)
        if listeners is None:
            return
        listeners.discard(listener)
        if not listeners:
            self._listeners.pop(collection, None)


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


__all__ = ["ChangeFeed", "SnapshotCallback", "Unsubscribe"]
