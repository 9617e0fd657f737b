"""Canonical type definitions for stored records and response envelopes.

This module is the **single source of truth for every named data shape** in
LocalStore.  Import from here; do not redefine shapes ad hoc.

## Records are open dicts

Conversations, folders and prompts arrive from a scraper or a UI and carry
arbitrary extra fields the engine never interprets.  They are therefore typed
as ``JSONObject`` aliases rather than TypedDicts: a TypedDict would reject the
unknown keys we are required to round-trip.  The well-known keys each record
type relies on are listed on the alias.

## Entity catalog

JSON primitives:
  JSONScalar            — str | int | float | bool | None
  JSONValue             — recursive JSON value (not for Pydantic fields)
  JSONObject            — dict[str, JSONValue]

Records:
  ConversationRecord    — id, title?, update_time?, create_time?, isTrashed?
  FolderRecord          — id, conversationIds
  PromptRecord          — id (assigned on save when missing)
  UserRecord            — the singleton user
  StoreSnapshot         — the full serialized store (one blob, one key)

Response shapes:
  ConversationPage      — get_conversations result
  MergeResult           — add_conversations result
  SubscriptionStatus    — check_has_subscription result
  ResponseEnvelope      — what the dispatch gateway hands back to callers
"""

from __future__ import annotations

from typing_extensions import TypedDict

JSONScalar = str | int | float | bool | None
"""A JSON leaf value with no recursive structure."""

JSONValue = str | int | float | bool | None | list["JSONValue"] | dict[str, "JSONValue"]
"""Recursive JSON value.

**Pydantic restriction:** Do NOT use in Pydantic ``BaseModel`` fields; use
``dict[str, object]`` there and narrow at the boundary.
"""

JSONObject = dict[str, JSONValue]
"""A JSON object with unknown key set."""


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════

ConversationRecord = JSONObject
"""A conversation.  Keys the engine reads: ``id``, ``title``, ``update_time``,
``create_time``, ``isTrashed``.  Everything else is opaque."""

FolderRecord = JSONObject
"""A folder.  Keys the engine reads: ``id``, ``conversationIds``."""

PromptRecord = JSONObject
"""A saved prompt.  Keys the engine reads: ``id``."""


class UserRecord(TypedDict, total=False):
    """The singleton local user.  Never deleted; seeded with a pro plan."""

    id: str
    email: str
    plan: str
    subscription_status: str


class StoreSnapshot(TypedDict, total=False):
    """Full store as written to (and read from) durable storage.

    ``total=False`` because a persisted snapshot may be partial: missing keys
    fall back to the built-in defaults during hydration.
    """

    conversations: list[ConversationRecord]
    folders: list[FolderRecord]
    prompts: list[PromptRecord]
    settings: JSONObject
    user: UserRecord
    notes: list[JSONValue]


# ═══════════════════════════════════════════════════════════════════════════════
# Operation results
# ═══════════════════════════════════════════════════════════════════════════════


class ConversationPage(TypedDict):
    """One page of conversations plus the pre-pagination match count."""

    items: list[ConversationRecord]
    total: int
    page: int
    limit: int


class MergeResult(TypedDict):
    """Outcome of an upsert batch: conversation count after the merge."""

    count: int


class SubscriptionStatus(TypedDict):
    """Static subscription answer; there is no billing backend."""

    hasSubscription: bool  # noqa: N815
    plan: str
    type: str


ResponseEnvelope = dict[str, object]
"""Gateway response.  Always has ``success`` except for ``ping``, which
answers ``{"status": "ok"}``.  Failures carry ``error``."""
