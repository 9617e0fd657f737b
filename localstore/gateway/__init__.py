"""Request dispatch gateway."""
from __future__ import annotations

from localstore.gateway.actions import Action, parse_action
from localstore.gateway.dispatcher import (
    Dispatcher,
    UNKNOWN_ACTION_ERROR,
    failure,
    get_dispatcher,
    reset_dispatcher,
)

__all__ = [
    "Action",
    "Dispatcher",
    "UNKNOWN_ACTION_ERROR",
    "failure",
    "get_dispatcher",
    "parse_action",
    "reset_dispatcher",
]
