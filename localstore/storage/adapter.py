"""Persistent store adapters — the only durable-storage interface the store core may depend on.

A snapshot is the whole store serialized as one JSON document under one key.
``load`` and ``save`` are the only suspension points of the data engine
besides the gateway's readiness wait.

Concrete adapters:
    SqlStoreAdapter    — one row per key in ``kv_entries`` (async SQLAlchemy)
    MemoryStoreAdapter — process-local dict; records every save (tests, ``memory`` backend)
"""
from __future__ import annotations

import asyncio
import logging
from copy import deepcopy
from typing import Callable, Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

from localstore.contracts.json_types import StoreSnapshot

logger = logging.getLogger(__name__)


@runtime_checkable
class StoreAdapter(Protocol):
    """Port every durable backend must satisfy."""

    async def load(self, key: str) -> StoreSnapshot | None:
        """Return the snapshot stored under ``key``, or None if absent.

        May raise; callers treat any exception as "start from defaults".
        """
        ...

    async def save(self, key: str, snapshot: StoreSnapshot) -> None:
        """Replace the snapshot stored under ``key``."""
        ...


class SqlStoreAdapter:
    """Stores snapshots in the ``kv_entries`` table.

    ``session_factory`` defaults to ``localstore.db.AsyncSessionLocal`` and is
    resolved lazily so the adapter can be built before ``init_db()`` runs.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession] | None = None) -> None:
        self._session_factory = session_factory

    def _session(self) -> AsyncSession:
        if self._session_factory is not None:
            return self._session_factory()
        from localstore.db import AsyncSessionLocal
        return AsyncSessionLocal()

    async def load(self, key: str) -> StoreSnapshot | None:
        from localstore.db.models import KeyValueEntry

        async with self._session() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                logger.debug(f"No stored snapshot under '{key}'")
                return None
            value: StoreSnapshot = entry.value  # type: ignore[assignment]  # JSON column is dict[str, Any]
            return value

    async def save(self, key: str, snapshot: StoreSnapshot) -> None:
        from localstore.db.models import KeyValueEntry

        async with self._session() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=dict(snapshot)))
            else:
                entry.value = dict(snapshot)
            await session.commit()


class MemoryStoreAdapter:
    """Dict-backed adapter.

    Every ``save`` is recorded in ``saves`` (key, snapshot copy) so callers can
    assert exactly what reached "durable" storage and when. ``load_error`` /
    ``save_error`` make the next calls raise; ``load_delay`` simulates slow
    startup I/O.
    """

    def __init__(
        self,
        initial: dict[str, StoreSnapshot] | None = None,
        *,
        load_delay: float = 0.0,
    ) -> None:
        self._data: dict[str, StoreSnapshot] = deepcopy(initial) if initial else {}
        self.saves: list[tuple[str, StoreSnapshot]] = []
        self.load_calls = 0
        self.load_delay = load_delay
        self.load_error: Exception | None = None
        self.save_error: Exception | None = None

    async def load(self, key: str) -> StoreSnapshot | None:
        self.load_calls += 1
        if self.load_delay > 0:
            await asyncio.sleep(self.load_delay)
        if self.load_error is not None:
            raise self.load_error
        value = self._data.get(key)
        return deepcopy(value) if value is not None else None

    async def save(self, key: str, snapshot: StoreSnapshot) -> None:
        if self.save_error is not None:
            raise self.save_error
        stored = deepcopy(snapshot)
        self._data[key] = stored
        self.saves.append((key, stored))

    def get(self, key: str) -> StoreSnapshot | None:
        """Peek at what is currently stored (no I/O simulation)."""
        return self._data.get(key)
