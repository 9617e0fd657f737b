"""
LocalStore Configuration

Environment-based configuration for the local data store service.
"""
import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _app_version_from_package() -> str:
    """Read version from pyproject.toml — the single source of truth."""
    try:
        from importlib.metadata import version
        return version("localstore")
    except Exception:
        pass
    # Fallback: parse pyproject.toml directly (dev / non-installed mode)
    try:
        from pathlib import Path
        import re
        pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
        match = re.search(r'^version\s*=\s*"([^"]+)"', pyproject.read_text(), re.MULTILINE)
        if match:
            return match.group(1)
    except Exception:
        pass
    return "0.0.0-unknown"


# Key under which the whole store is serialized. Kept identical to the key the
# browser extension used so existing snapshots load unchanged.
DEFAULT_STORE_KEY: str = "localGPT_DB"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service Info
    app_name: str = "LocalStore"
    app_version: str = _app_version_from_package()
    debug: bool = False

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 10010

    # Storage Configuration
    # SQLite (default): sqlite+aiosqlite:///./localstore.db
    # "memory" keeps the snapshot in-process only (nothing survives a restart)
    database_url: Optional[str] = None
    storage_backend: Literal["sql", "memory"] = "sql"
    store_key: str = DEFAULT_STORE_KEY

    # Debounced persistence: quiet period before a burst of mutations is written
    save_debounce_seconds: float = 0.5

    # Readiness gate: requests arriving before hydration completes wait at most
    # ready_max_retries * ready_retry_delay_seconds
    ready_max_retries: int = 10
    ready_retry_delay_seconds: float = 0.1

    # Query defaults
    default_page_limit: int = 20

    @model_validator(mode="after")
    def _warn_non_positive_timings(self) -> "Settings":
        """Warn when timing knobs would make the store behave oddly."""
        if self.save_debounce_seconds <= 0:
            logging.getLogger(__name__).warning(
                "LOCALSTORE_SAVE_DEBOUNCE_SECONDS <= 0: every mutation is written "
                "on the next loop iteration."
            )
        if self.ready_max_retries <= 0 or self.ready_retry_delay_seconds <= 0:
            logging.getLogger(__name__).warning(
                "Readiness wait budget is zero; requests arriving before the "
                "store is hydrated will fail immediately."
            )
        return self

    @property
    def ready_timeout_seconds(self) -> float:
        """Total time a request may wait for the store to become ready."""
        return max(0, self.ready_max_retries) * max(0.0, self.ready_retry_delay_seconds)

    model_config = SettingsConfigDict(
        env_prefix="LOCALSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience access
settings = get_settings()
