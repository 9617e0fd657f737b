"""
In-memory StateStore for LocalStore.

This is the **authoritative source of truth** for every collection while the
process is alive.  Durable storage only ever receives copies of it.

Lifecycle:
    construct (built-in defaults)
        └── start()      → hydrate() runs in the background
        └── hydrate()    → load snapshot, shallow-merge over defaults, mark ready
        └── ready        → gateway serves requests
        └── close()      → flush the pending debounced write

Hydration marks the store ready even when the load fails: the store then
serves the defaults rather than blocking callers forever.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from copy import deepcopy
from typing import Optional

from localstore.config import settings
from localstore.contracts.json_types import (
    ConversationRecord,
    FolderRecord,
    JSONObject,
    JSONValue,
    PromptRecord,
    StoreSnapshot,
    UserRecord,
)
from localstore.core.persistence import DebouncedSaver
from localstore.storage.adapter import MemoryStoreAdapter, SqlStoreAdapter, StoreAdapter

logger = logging.getLogger(__name__)


DEFAULT_USER: UserRecord = {
    "id": "local-user",
    "email": "local@localgpt.app",
    "plan": "pro",
    "subscription_status": "active",
}

# Top-level collections owned by the store; any other key found in a snapshot
# is carried through untouched.
STORE_FIELDS: tuple[str, ...] = (
    "conversations",
    "folders",
    "prompts",
    "settings",
    "user",
    "notes",
)


def default_snapshot() -> StoreSnapshot:
    """Return a fresh copy of the built-in default store."""
    return {
        "conversations": [],
        "folders": [],
        "prompts": [],
        "settings": {},
        "user": dict(DEFAULT_USER),  # type: ignore[typeddict-item]  # dict() widens the TypedDict
        "notes": [],
    }


class StoreNotReadyError(Exception):
    """Raised when the store is still hydrating after the allowed wait."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__("Database initialization timeout")


class LocalStore:
    """
    Single-owner container for conversations, folders, prompts, settings,
    the singleton user and notes.

    All access happens on one event loop; mutations are plain in-memory work
    followed by ``mark_changed()``, which (re)arms the debounced writer.

    Usage:
        store = LocalStore(MemoryStoreAdapter())
        store.start()
        await store.wait_until_ready(timeout=1.0)
        store.prompts.append({"id": "p1"})
        store.mark_changed()
        await store.close()
    """

    def __init__(
        self,
        adapter: StoreAdapter,
        *,
        key: Optional[str] = None,
        save_delay: Optional[float] = None,
    ):
        self._adapter = adapter
        self._key = key or settings.store_key

        defaults = default_snapshot()
        self.conversations: list[ConversationRecord] = defaults["conversations"]
        self.folders: list[FolderRecord] = defaults["folders"]
        self.prompts: list[PromptRecord] = defaults["prompts"]
        self.settings: JSONObject = defaults["settings"]
        self.user: UserRecord = defaults["user"]
        self.notes: list[JSONValue] = defaults["notes"]
        self._extra: dict[str, object] = {}

        self._ready = asyncio.Event()
        self._hydrate_task: asyncio.Task[None] | None = None
        self._saver = DebouncedSaver(
            adapter,
            self._key,
            self.to_snapshot,
            delay=settings.save_debounce_seconds if save_delay is None else save_delay,
        )

    @property
    def key(self) -> str:
        return self._key

    @property
    def adapter(self) -> StoreAdapter:
        return self._adapter

    @property
    def saver(self) -> DebouncedSaver:
        """The debounced writer (exposes ``status`` for health checks and tests)."""
        return self._saver

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    # =========================================================================
    # Initialization
    # =========================================================================

    def start(self) -> asyncio.Task[None]:
        """Begin hydration in the background.  Idempotent."""
        if self._hydrate_task is None:
            self._hydrate_task = asyncio.get_running_loop().create_task(self.hydrate())
        return self._hydrate_task

    async def hydrate(self) -> None:
        """Load the persisted snapshot (if any) and mark the store ready."""
        try:
            snapshot = await self._adapter.load(self._key)
            if snapshot:
                if isinstance(snapshot, Mapping):
                    self.apply_snapshot(snapshot)
                else:
                    logger.warning(
                        f"Ignoring stored value under '{self._key}': expected an object, "
                        f"got {type(snapshot).__name__}"
                    )
            logger.info(
                f"Store initialized: {len(self.conversations)} conversations, "
                f"{len(self.folders)} folders, {len(self.prompts)} prompts"
            )
        except Exception:
            logger.exception("Failed to initialize store; continuing with defaults")
        finally:
            self._ready.set()

    async def wait_until_ready(self, timeout: float) -> None:
        """Return once hydrated.  Raises StoreNotReadyError after ``timeout`` seconds."""
        if self._ready.is_set():
            return
        try:
            await asyncio.wait_for(self._ready.wait(), timeout=max(0.0, timeout))
        except asyncio.TimeoutError:
            raise StoreNotReadyError(timeout) from None

    def apply_snapshot(self, snapshot: Mapping[str, object]) -> None:
        """
        Shallow-merge a persisted snapshot over the current state.

        A key present in the snapshot always wins, even when its value is an
        empty collection.
        """
        for field_name, value in snapshot.items():
            if field_name in STORE_FIELDS:
                setattr(self, field_name, value)
            else:
                self._extra[field_name] = value

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_snapshot(self) -> StoreSnapshot:
        """Deep copy of the full store, ready to hand to the adapter."""
        data: dict[str, object] = dict(self._extra)
        for field_name in STORE_FIELDS:
            data[field_name] = getattr(self, field_name)
        snapshot: StoreSnapshot = deepcopy(data)  # type: ignore[assignment]  # keys match STORE_FIELDS
        return snapshot

    def mark_changed(self) -> None:
        """Record that state changed; the debounced writer persists it later."""
        self._saver.schedule()

    async def close(self) -> None:
        """Flush any pending write.  The store stays usable afterwards."""
        await self._saver.flush()

    # =========================================================================
    # Lookups
    # =========================================================================

    def find_folder(self, folder_id: str) -> FolderRecord | None:
        """Return the first folder with ``folder_id`` (not a copy)."""
        for folder in self.folders:
            if folder.get("id") == folder_id:
                return folder
        return None


# =============================================================================
# Process-wide store
# =============================================================================

_store: LocalStore | None = None


def build_adapter() -> StoreAdapter:
    """Create the adapter selected by ``LOCALSTORE_STORAGE_BACKEND``."""
    if settings.storage_backend == "memory":
        return MemoryStoreAdapter()
    return SqlStoreAdapter()


def get_store() -> LocalStore:
    """Return the process-wide ``LocalStore``, creating it if needed."""
    global _store
    if _store is None:
        _store = LocalStore(build_adapter())
    return _store


def reset_store() -> None:
    """Forget the process-wide store (for testing)."""
    global _store
    _store = None
