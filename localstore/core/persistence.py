"""Debounced persistence for the store snapshot.

Mutations call ``DebouncedSaver.schedule()``.  Each call cancels the pending
timer (if any) and starts a new one, so a burst of mutations produces one
durable write, made ``delay`` seconds after the last mutation, containing the
state as it is when the timer fires.

Invariants:
    1. At most one timer is outstanding.
    2. A write that has already started is never cancelled by a new mutation.
    3. Save errors are logged and recorded in ``SaveStatus``; they never reach
       the mutation caller.
    4. Writes run one at a time, in the order they started.  Each takes its
       snapshot only once the previous write has finished, so an older
       snapshot never lands after a newer one.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from localstore.contracts.json_types import StoreSnapshot
from localstore.storage.adapter import StoreAdapter

logger = logging.getLogger(__name__)


@dataclass
class SaveStatus:
    """Observable outcome of durable writes."""

    writes: int = 0
    failures: int = 0
    last_error: str | None = None
    last_saved_at: datetime | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "writes": self.writes,
            "failures": self.failures,
            "last_error": self.last_error,
            "last_saved_at": self.last_saved_at.isoformat() if self.last_saved_at else None,
        }


class DebouncedSaver:
    """Single-slot deferred writer.

    ``snapshot`` is called when the timer fires (not when it is scheduled), so
    the write always carries the latest state.
    """

    def __init__(
        self,
        adapter: StoreAdapter,
        key: str,
        snapshot: Callable[[], StoreSnapshot],
        delay: float = 0.5,
    ) -> None:
        self._adapter = adapter
        self._key = key
        self._snapshot = snapshot
        self._delay = max(0.0, delay)
        self._handle: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._write_lock = asyncio.Lock()
        self._idle = asyncio.Event()
        self._idle.set()
        self.status = SaveStatus()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._handle is not None

    @property
    def writing(self) -> bool:
        """True while a write is in flight."""
        return bool(self._inflight)

    def schedule(self) -> None:
        """Restart the quiet-period timer.  Must be called from the event loop."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._idle.clear()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending timer without writing."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._maybe_idle()

    async def flush(self) -> None:
        """Write now if a timer is pending, then wait for in-flight writes."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            await self._write()
        if self._inflight:
            await asyncio.wait(set(self._inflight))
        self._maybe_idle()

    async def join(self) -> None:
        """Wait until no timer is pending and no write is in flight."""
        await self._idle.wait()

    def _fire(self) -> None:
        self._handle = None
        task = asyncio.get_running_loop().create_task(self._write())
        self._inflight.add(task)
        task.add_done_callback(self._on_write_done)

    def _on_write_done(self, task: asyncio.Task[None]) -> None:
        self._inflight.discard(task)
        self._maybe_idle()

    def _maybe_idle(self) -> None:
        if self._handle is None and not self._inflight:
            self._idle.set()

    async def _write(self) -> None:
        async with self._write_lock:
            try:
                await self._adapter.save(self._key, self._snapshot())
            except Exception as e:
                self.status.failures += 1
                self.status.last_error = str(e) or type(e).__name__
                logger.exception(f"Failed to save store under '{self._key}'")
                return
            self.status.writes += 1
            self.status.last_error = None
            self.status.last_saved_at = datetime.now(timezone.utc)
            logger.info("Store saved")
