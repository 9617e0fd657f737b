"""Health check endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from localstore.config import settings
from localstore.core.state_store import get_store

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check."""
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@router.get("/health/store")
async def store_health_check() -> dict[str, Any]:
    """
    Store health.

    Reports:
    - whether hydration has finished
    - whether a debounced write is pending or in flight
    - durable write counters and the last save error, if any
    """
    store = get_store()
    saver = store.saver
    return {
        "status": "ok" if store.is_ready and saver.status.last_error is None else "degraded",
        "ready": store.is_ready,
        "backend": settings.storage_backend,
        "key": store.key,
        "save_pending": saver.pending,
        "save_in_flight": saver.writing,
        "save": saver.status.to_dict(),
    }
