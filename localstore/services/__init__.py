"""
Store service package.

Query, sync and CRUD operations over the in-memory ``LocalStore``.
"""
from __future__ import annotations

from localstore.services.conversations import (
    add_conversations,
    effective_timestamp,
    get_conversations,
    parse_timestamp,
)
from localstore.services.prompts import delete_prompt, get_prompts, save_prompt
from localstore.services.users import check_has_subscription, register_user

__all__ = [
    # Conversations
    "add_conversations",
    "effective_timestamp",
    "get_conversations",
    "parse_timestamp",
    # Prompts
    "delete_prompt",
    "get_prompts",
    "save_prompt",
    # Users
    "check_has_subscription",
    "register_user",
]
