"""
Dispatch gateway: request message in, response envelope out.

States:
    NOT READY — store still hydrating; requests wait (bounded) for READY
    READY     — requests are routed to the services

Rules:
    1. ``ping`` answers ``{"status": "ok"}`` immediately, ready or not.
    2. A request still waiting when the budget runs out gets a structured
       ``Database initialization timeout`` failure.
    3. Unknown actions get ``{"success": False, "error": "Unknown action"}``.
    4. Any exception from a handler is logged and returned as
       ``{"success": False, "error": <message>}``; nothing propagates.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from typing_extensions import assert_never

from localstore.config import settings
from localstore.contracts.json_types import ResponseEnvelope
from localstore.core.state_store import LocalStore, StoreNotReadyError, get_store
from localstore.gateway.actions import Action, action_name, parse_action
from localstore.models.requests import (
    AddConversationsRequest,
    DeletePromptRequest,
    GetConversationsRequest,
    SavePromptRequest,
)
from localstore.services.conversations import add_conversations, get_conversations
from localstore.services.prompts import delete_prompt, get_prompts, save_prompt
from localstore.services.users import check_has_subscription, register_user

logger = logging.getLogger(__name__)

UNKNOWN_ACTION_ERROR = "Unknown action"
PING_RESPONSE: ResponseEnvelope = {"status": "ok"}


def failure(error: str) -> ResponseEnvelope:
    """Build the failure envelope."""
    return {"success": False, "error": error}


class Dispatcher:
    """Routes request messages to the store services."""

    def __init__(self, store: LocalStore, ready_timeout: Optional[float] = None):
        self._store = store
        self._ready_timeout = (
            settings.ready_timeout_seconds if ready_timeout is None else ready_timeout
        )

    @property
    def store(self) -> LocalStore:
        return self._store

    async def dispatch(self, message: Mapping[str, object]) -> ResponseEnvelope:
        """Handle one request message.  Never raises."""
        if not isinstance(message, Mapping):
            message = {}
        action = parse_action(message)

        if action is Action.PING:
            return dict(PING_RESPONSE)

        try:
            await self._store.wait_until_ready(self._ready_timeout)
        except StoreNotReadyError as e:
            logger.warning(f"Store not ready after {e.timeout:.2f}s; rejecting request")
            return failure(str(e))

        if action is None:
            logger.warning(f"Unknown action: {action_name(message)!r}")
            return failure(UNKNOWN_ACTION_ERROR)

        logger.debug(f"Dispatching {action.value}")
        try:
            return self._handle(action, message)
        except Exception as e:
            logger.exception(f"Handler error: {action.value}")
            return failure(str(e) or type(e).__name__)

    def _handle(self, action: Action, message: Mapping[str, object]) -> ResponseEnvelope:
        store = self._store
        match action:
            case Action.CHECK_HAS_SUBSCRIPTION:
                return {"success": True, **check_has_subscription()}

            case Action.REGISTER_USER:
                return {"success": True, "user": register_user(store)}

            case Action.ADD_CONVERSATIONS:
                add_req = AddConversationsRequest.model_validate(message)
                merged = add_conversations(store, add_req.conversations or [])  # type: ignore[arg-type]  # dict[str, object] → ConversationRecord
                return {"success": True, "count": merged["count"]}

            case Action.GET_CONVERSATIONS:
                query = GetConversationsRequest.model_validate(message)
                result = get_conversations(
                    store,
                    page=query.page,
                    limit=query.limit,
                    search_term=query.search_term,
                    folder_id=query.folder_id,
                )
                return {
                    "success": True,
                    "conversations": result["items"],
                    "total": result["total"],
                    "page": result["page"],
                    "limit": result["limit"],
                }

            case Action.GET_PROMPTS:
                return {"success": True, "prompts": get_prompts(store)}

            case Action.SAVE_PROMPT:
                save_req = SavePromptRequest.model_validate(message)
                saved = save_prompt(store, save_req.prompt or {})  # type: ignore[arg-type]  # dict[str, object] → PromptRecord
                return {"success": True, "prompt": saved}

            case Action.DELETE_PROMPT:
                delete_req = DeletePromptRequest.model_validate(message)
                delete_prompt(store, delete_req.id)
                return {"success": True}

            case Action.PING:
                return dict(PING_RESPONSE)

            case _:
                assert_never(action)


# Singleton instance
_dispatcher: Dispatcher | None = None


def get_dispatcher() -> Dispatcher:
    """Get the singleton dispatcher bound to the process-wide store."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = Dispatcher(get_store())
    return _dispatcher


def reset_dispatcher() -> None:
    """Forget the singleton dispatcher (for testing)."""
    global _dispatcher
    _dispatcher = None
