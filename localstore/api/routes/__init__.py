"""API route modules."""
from __future__ import annotations

from localstore.api.routes import health, messages

__all__ = ["health", "messages"]
