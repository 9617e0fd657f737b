"""
Conversation query and sync service.

Two operations over ``LocalStore.conversations``:

- ``get_conversations`` — search → folder filter → newest-first sort → page.
- ``add_conversations`` — upsert a scraped batch by ``id``; incoming fields win.
"""
from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from copy import deepcopy
from datetime import datetime, timezone
from typing import Optional

from localstore.config import settings
from localstore.contracts.json_types import (
    ConversationPage,
    ConversationRecord,
    FolderRecord,
    JSONValue,
    MergeResult,
)
from localstore.core.state_store import LocalStore

logger = logging.getLogger(__name__)

# folder_id sentinels
ALL_FOLDERS = "all"
TRASH_FOLDER = "trash"


# =============================================================================
# Timestamps
# =============================================================================

def parse_timestamp(value: JSONValue) -> float:
    """
    Convert a timestamp-like value to a sortable number.

    Numbers are used as-is (epoch values). Strings are read as a number first,
    then as ISO-8601 (a trailing ``Z`` is accepted; naive values are UTC).
    Anything else, or an unparseable string, sorts as 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value:
        try:
            return float(value)
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparseable timestamp {value!r}; sorting as 0")
            return 0.0
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.timestamp()
    return 0.0


def effective_timestamp(conversation: ConversationRecord) -> float:
    """``update_time`` if set, else ``create_time``, else 0."""
    return parse_timestamp(
        conversation.get("update_time") or conversation.get("create_time") or 0
    )


# =============================================================================
# Query
# =============================================================================

def _matches_search(conversation: ConversationRecord, lower_term: str) -> bool:
    title = conversation.get("title")
    return isinstance(title, str) and bool(title) and lower_term in title.lower()


def _folder_member_ids(folder: FolderRecord) -> set[object]:
    """Hashable entries of ``conversationIds``; a missing or malformed value is empty."""
    raw_ids = folder.get("conversationIds")
    if raw_ids is None:
        return set()
    if isinstance(raw_ids, (str, bytes, Mapping)) or not isinstance(raw_ids, Iterable):
        logger.debug(
            f"Folder {folder.get('id')!r} has non-sequence conversationIds "
            f"({type(raw_ids).__name__}); treating it as empty"
        )
        return set()
    return {i for i in raw_ids if isinstance(i, Hashable)}


def _filter_by_folder(
    store: LocalStore,
    conversations: list[ConversationRecord],
    folder_id: str,
) -> list[ConversationRecord]:
    """
    Apply the folder relationship filter.

    - ``"trash"`` → only ``isTrashed``, even if a real folder has that id.
    - A real folder with this id → only its ``conversationIds``.
    - Anything else → input returned unfiltered. A missing folder is neither an
      error nor an empty result.
    """
    if folder_id == TRASH_FOLDER:
        return [c for c in conversations if c.get("isTrashed") is True]
    folder = store.find_folder(folder_id)
    if folder is not None:
        allowed_ids = _folder_member_ids(folder)
        return [c for c in conversations if c.get("id") in allowed_ids]
    logger.debug(f"Folder {folder_id!r} not found; returning unfiltered conversations")
    return conversations


def get_conversations(
    store: LocalStore,
    page: int = 1,
    limit: Optional[int] = None,
    search_term: Optional[str] = None,
    folder_id: Optional[str] = None,
) -> ConversationPage:
    """
    Search, filter, sort and paginate conversations.

    Args:
        store: The state container
        page: 1-indexed page number
        limit: Page size (defaults to ``settings.default_page_limit``)
        search_term: Case-insensitive substring of ``title``; titleless
            conversations never match
        folder_id: Folder id, or the ``"all"`` / ``"trash"`` sentinels

    Returns:
        ConversationPage with copies of the page's conversations and the
        pre-pagination ``total``. Out-of-range pages are empty.
    """
    if limit is None:
        limit = settings.default_page_limit

    results: list[ConversationRecord] = store.conversations

    if search_term:
        lower_term = search_term.lower()
        results = [c for c in results if _matches_search(c, lower_term)]

    if folder_id and folder_id != ALL_FOLDERS:
        results = _filter_by_folder(store, results, folder_id)

    # sorted() is stable: equal timestamps keep their stored order
    results = sorted(results, key=effective_timestamp, reverse=True)

    total = len(results)
    if page < 1 or limit < 1:
        items: list[ConversationRecord] = []
    else:
        start = (page - 1) * limit
        items = results[start:start + limit]

    return {
        "items": deepcopy(items),
        "total": total,
        "page": page,
        "limit": limit,
    }


# =============================================================================
# Sync (upsert)
# =============================================================================

def add_conversations(
    store: LocalStore,
    conversations: Iterable[ConversationRecord],
) -> MergeResult:
    """
    Upsert conversations by ``id``.

    Existing records are shallow-merged with incoming fields winning; unknown
    ids are appended. Within one batch, later entries for the same id win.
    Existing records keep their position. A non-empty batch schedules one
    durable write for the whole call.

    Returns:
        MergeResult with the conversation count after the merge
    """
    by_id: dict[JSONValue, ConversationRecord] = {
        c.get("id"): c for c in store.conversations
    }
    inserted = 0
    updated = 0

    for incoming in conversations:
        record = deepcopy(incoming)
        conversation_id = record.get("id")
        existing = by_id.get(conversation_id)
        if existing is not None:
            by_id[conversation_id] = {**existing, **record}
            updated += 1
        else:
            by_id[conversation_id] = record
            inserted += 1

    if inserted or updated:
        store.conversations = list(by_id.values())
        store.mark_changed()
        logger.info(
            f"Synced conversations: {inserted} inserted, {updated} updated, "
            f"{len(store.conversations)} total"
        )

    return {"count": len(store.conversations)}
