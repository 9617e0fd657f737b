"""Request payload models, one per gateway action that takes input.

Opaque records stay ``dict[str, object]``: the engine never interprets their
extra fields, and ``JSONValue`` cannot be used in Pydantic fields.  Missing or
null payloads are treated as empty, the way the extension always sent them.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field

from localstore.models.base import CamelModel


class GetConversationsRequest(CamelModel):
    """Query parameters for ``getConversations``."""

    page: int = Field(default=1, description="1-indexed page number")
    limit: Optional[int] = Field(
        default=None,
        description="Page size; the configured default when omitted",
    )
    search_term: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring to match against titles",
    )
    folder_id: Optional[str] = Field(
        default=None,
        description="Folder id, or the 'all' / 'trash' sentinels",
    )


class AddConversationsRequest(CamelModel):
    """Batch of scraped conversations for ``addConversations``."""

    conversations: Optional[list[dict[str, object]]] = None


class SavePromptRequest(CamelModel):
    """Prompt to insert or replace for ``savePrompt``."""

    prompt: Optional[dict[str, object]] = None


class DeletePromptRequest(CamelModel):
    """Prompt id to remove for ``deletePrompt``."""

    id: Optional[str | int] = None
