"""User and subscription service.

There is no billing or account backend: the subscription answer is static and
the user is the singleton seeded into the store.
"""
from __future__ import annotations

from copy import deepcopy

from localstore.contracts.json_types import SubscriptionStatus, UserRecord
from localstore.core.state_store import LocalStore


def check_has_subscription() -> SubscriptionStatus:
    """Always report an active pro plan."""
    return {"hasSubscription": True, "plan": "pro", "type": "stripe"}


def register_user(store: LocalStore) -> UserRecord:
    """Return the singleton user.  Never creates a second one."""
    return deepcopy(store.user)
