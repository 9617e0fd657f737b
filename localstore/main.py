"""
LocalStore API

FastAPI application exposing the local data store to the browser extension.

Usage:
    python -m localstore.main
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from localstore.config import settings
from localstore.api.routes import health, messages
from localstore.core.state_store import get_store
from localstore.db import init_db, close_db

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Storage backend: {settings.storage_backend}")

    if settings.storage_backend == "sql":
        try:
            await init_db()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    # Hydration runs in the background; requests arriving meanwhile wait on
    # the gateway's readiness gate.
    store = get_store()
    store.start()

    yield

    # Cleanup
    logger.info("Shutting down...")
    await store.close()
    if settings.storage_backend == "sql":
        await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Local, in-process replacement for the conversation sync backend.",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
)

# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(messages.router, prefix="/api/v1", tags=["messages"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with service info."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("localstore.main:app", host=settings.host, port=settings.port)
