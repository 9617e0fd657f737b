"""Tests for localstore.services.users."""
from __future__ import annotations

import pytest

from localstore.core.state_store import DEFAULT_USER, LocalStore
from localstore.services.users import check_has_subscription, register_user


def test_subscription_is_static_pro() -> None:
    assert check_has_subscription() == {
        "hasSubscription": True,
        "plan": "pro",
        "type": "stripe",
    }


@pytest.mark.asyncio
async def test_register_user_returns_default_singleton(store: LocalStore) -> None:
    assert register_user(store) == DEFAULT_USER


@pytest.mark.asyncio
async def test_register_user_never_creates_second_user(store: LocalStore) -> None:
    first = register_user(store)
    second = register_user(store)
    assert first == second
    assert store.user == DEFAULT_USER
    assert not store.saver.pending


@pytest.mark.asyncio
async def test_register_user_returns_copy(store: LocalStore) -> None:
    user = register_user(store)
    user["plan"] = "free"
    assert store.user["plan"] == "pro"


@pytest.mark.asyncio
async def test_register_user_reflects_persisted_user(store: LocalStore) -> None:
    store.apply_snapshot({"user": {"id": "u-9", "email": "me@example.com", "plan": "pro"}})
    assert register_user(store)["id"] == "u-9"
