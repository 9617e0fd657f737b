"""Closed set of actions the dispatch gateway understands."""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class Action(str, Enum):
    """Wire names of every supported request."""

    CHECK_HAS_SUBSCRIPTION = "checkHasSubscription"
    REGISTER_USER = "registerUser"
    ADD_CONVERSATIONS = "addConversations"
    GET_CONVERSATIONS = "getConversations"
    GET_PROMPTS = "getPrompts"
    SAVE_PROMPT = "savePrompt"
    DELETE_PROMPT = "deletePrompt"
    PING = "ping"


def action_name(message: Mapping[str, object]) -> object:
    """Raw action name: ``type`` if set, otherwise ``action``."""
    return message.get("type") or message.get("action")


def parse_action(message: Mapping[str, object]) -> Action | None:
    """Return the message's Action, or None when it names no known action."""
    raw = action_name(message)
    if not isinstance(raw, str):
        return None
    try:
        return Action(raw)
    except ValueError:
        return None
