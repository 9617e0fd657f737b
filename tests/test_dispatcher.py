"""
Tests for localstore.gateway.dispatcher.Dispatcher.

  1. Action parsing — type/action fallback, unknown names
  2. Readiness gate — ping bypass, wait-then-succeed, timeout failure
  3. Routing — every action's success envelope
  4. Faults — unknown action, handler exceptions, invalid payloads
"""
from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from localstore.core.state_store import LocalStore
from localstore.gateway.actions import Action, parse_action
from localstore.gateway.dispatcher import Dispatcher, get_dispatcher, reset_dispatcher
from localstore.storage.adapter import MemoryStoreAdapter


# ===========================================================================
# 1. Action parsing
# ===========================================================================

class TestParseAction:

    def test_type_field(self) -> None:
        assert parse_action({"type": "getPrompts"}) is Action.GET_PROMPTS

    def test_action_field_fallback(self) -> None:
        assert parse_action({"action": "savePrompt"}) is Action.SAVE_PROMPT

    def test_type_wins_over_action(self) -> None:
        assert parse_action({"type": "ping", "action": "getPrompts"}) is Action.PING

    def test_unknown(self) -> None:
        assert parse_action({"type": "dropTables"}) is None
        assert parse_action({}) is None
        assert parse_action({"type": 3}) is None


# ===========================================================================
# 2. Readiness gate
# ===========================================================================

class TestReadinessGate:

    @pytest.mark.asyncio
    async def test_ping_bypasses_readiness(self) -> None:
        store = LocalStore(MemoryStoreAdapter(), key="k", save_delay=0.01)
        dispatcher = Dispatcher(store, ready_timeout=5.0)
        # never hydrated: ping must still answer at once
        response = await asyncio.wait_for(dispatcher.dispatch({"type": "ping"}), timeout=0.5)
        assert response == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_request_waits_then_succeeds(self) -> None:
        adapter = MemoryStoreAdapter({"k": {"prompts": [{"id": "p1"}]}}, load_delay=0.05)
        store = LocalStore(adapter, key="k", save_delay=0.01)
        dispatcher = Dispatcher(store, ready_timeout=2.0)
        store.start()
        assert not store.is_ready
        response = await dispatcher.dispatch({"type": "getPrompts"})
        assert response == {"success": True, "prompts": [{"id": "p1"}]}

    @pytest.mark.asyncio
    async def test_request_times_out_with_structured_failure(self) -> None:
        store = LocalStore(MemoryStoreAdapter(load_delay=0.3), key="k", save_delay=0.01)
        dispatcher = Dispatcher(store, ready_timeout=0.02)
        task = store.start()
        response = await dispatcher.dispatch({"type": "getPrompts"})
        assert response == {"success": False, "error": "Database initialization timeout"}
        await task

    @pytest.mark.asyncio
    async def test_load_failure_does_not_block(self) -> None:
        adapter = MemoryStoreAdapter()
        adapter.load_error = RuntimeError("corrupt")
        store = LocalStore(adapter, key="k", save_delay=0.01)
        dispatcher = Dispatcher(store, ready_timeout=1.0)
        store.start()
        response = await dispatcher.dispatch({"type": "registerUser"})
        assert response["success"] is True


# ===========================================================================
# 3. Routing
# ===========================================================================

class TestRouting:

    @pytest.mark.asyncio
    async def test_check_has_subscription(self, dispatcher: Dispatcher) -> None:
        assert await dispatcher.dispatch({"type": "checkHasSubscription"}) == {
            "success": True,
            "hasSubscription": True,
            "plan": "pro",
            "type": "stripe",
        }

    @pytest.mark.asyncio
    async def test_register_user(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch({"action": "registerUser"})
        assert response["success"] is True
        assert response["user"]["id"] == "local-user"  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_add_then_get_conversations(self, dispatcher: Dispatcher) -> None:
        added = await dispatcher.dispatch({
            "type": "addConversations",
            "conversations": [
                {"id": "a", "title": "Alpha", "update_time": 1},
                {"id": "b", "title": "Beta", "update_time": 3},
                {"id": "c", "title": "Gamma", "update_time": 2},
            ],
        })
        assert added == {"success": True, "count": 3}

        response = await dispatcher.dispatch({"type": "getConversations", "page": 1, "limit": 2})
        assert response["success"] is True
        assert [c["id"] for c in response["conversations"]] == ["b", "c"]  # type: ignore[union-attr]
        assert response["total"] == 3
        assert response["page"] == 1
        assert response["limit"] == 2

    @pytest.mark.asyncio
    async def test_get_conversations_defaults(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch({"type": "getConversations"})
        assert response == {
            "success": True,
            "conversations": [],
            "total": 0,
            "page": 1,
            "limit": 20,
        }

    @pytest.mark.asyncio
    async def test_get_conversations_camel_case_filters(
        self, dispatcher: Dispatcher, store: LocalStore
    ) -> None:
        store.conversations = [
            {"id": "a", "title": "Python", "isTrashed": True},
            {"id": "b", "title": "python 2"},
        ]
        response = await dispatcher.dispatch({
            "type": "getConversations",
            "searchTerm": "PYTHON",
            "folderId": "trash",
        })
        assert [c["id"] for c in response["conversations"]] == ["a"]  # type: ignore[union-attr]

    @pytest.mark.asyncio
    async def test_add_conversations_missing_list(self, dispatcher: Dispatcher) -> None:
        assert await dispatcher.dispatch({"type": "addConversations"}) == {
            "success": True,
            "count": 0,
        }

    @pytest.mark.asyncio
    async def test_prompt_lifecycle(self, dispatcher: Dispatcher) -> None:
        saved = await dispatcher.dispatch({"type": "savePrompt", "prompt": {"title": "t"}})
        assert saved["success"] is True
        prompt_id = saved["prompt"]["id"]  # type: ignore[index]

        listed = await dispatcher.dispatch({"type": "getPrompts"})
        assert listed == {"success": True, "prompts": [{"id": prompt_id, "title": "t"}]}

        deleted = await dispatcher.dispatch({"type": "deletePrompt", "id": prompt_id})
        assert deleted == {"success": True}
        assert (await dispatcher.dispatch({"type": "getPrompts"}))["prompts"] == []

    @pytest.mark.asyncio
    async def test_delete_unknown_prompt_succeeds(self, dispatcher: Dispatcher) -> None:
        assert await dispatcher.dispatch({"type": "deletePrompt", "id": "nope"}) == {"success": True}

    @pytest.mark.asyncio
    async def test_mutations_reach_storage(
        self, dispatcher: Dispatcher, store: LocalStore, adapter: MemoryStoreAdapter
    ) -> None:
        await dispatcher.dispatch({"type": "addConversations", "conversations": [{"id": "a"}]})
        await dispatcher.dispatch({"type": "savePrompt", "prompt": {"id": "p"}})
        await store.saver.join()
        assert len(adapter.saves) == 1
        _, snapshot = adapter.saves[0]
        assert snapshot["conversations"] == [{"id": "a"}]
        assert snapshot["prompts"] == [{"id": "p"}]


# ===========================================================================
# 4. Faults
# ===========================================================================

class TestFaults:

    @pytest.mark.asyncio
    async def test_unknown_action(self, dispatcher: Dispatcher) -> None:
        assert await dispatcher.dispatch({"type": "formatDisk"}) == {
            "success": False,
            "error": "Unknown action",
        }

    @pytest.mark.asyncio
    async def test_missing_action(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch({})
        assert response == {"success": False, "error": "Unknown action"}

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_failure(self, dispatcher: Dispatcher) -> None:
        with patch(
            "localstore.gateway.dispatcher.get_prompts",
            side_effect=RuntimeError("boom"),
        ):
            response = await dispatcher.dispatch({"type": "getPrompts"})
        assert response == {"success": False, "error": "boom"}

    @pytest.mark.asyncio
    async def test_dispatcher_keeps_working_after_fault(self, dispatcher: Dispatcher) -> None:
        with patch(
            "localstore.gateway.dispatcher.register_user",
            side_effect=KeyError("user"),
        ):
            assert (await dispatcher.dispatch({"type": "registerUser"}))["success"] is False
        assert (await dispatcher.dispatch({"type": "registerUser"}))["success"] is True

    @pytest.mark.asyncio
    async def test_invalid_payload_becomes_failure(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch({"type": "getConversations", "page": "first"})
        assert response["success"] is False
        assert "page" in str(response["error"])

    @pytest.mark.asyncio
    async def test_non_dict_conversations_rejected(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.dispatch({"type": "addConversations", "conversations": [1, 2]})
        assert response["success"] is False


def test_get_dispatcher_singleton() -> None:
    first = get_dispatcher()
    assert get_dispatcher() is first
    reset_dispatcher()
    assert get_dispatcher() is not first
