"""Pydantic models for LocalStore request payloads."""
from __future__ import annotations

from localstore.models.base import CamelModel
from localstore.models.requests import (
    AddConversationsRequest,
    DeletePromptRequest,
    GetConversationsRequest,
    SavePromptRequest,
)

__all__ = [
    "CamelModel",
    "AddConversationsRequest",
    "DeletePromptRequest",
    "GetConversationsRequest",
    "SavePromptRequest",
]
