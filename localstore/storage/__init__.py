"""Durable storage adapters for the store snapshot."""
from __future__ import annotations

from localstore.storage.adapter import MemoryStoreAdapter, SqlStoreAdapter, StoreAdapter

__all__ = ["MemoryStoreAdapter", "SqlStoreAdapter", "StoreAdapter"]
