"""
Message endpoint.

The extension (or any other caller) posts the same request messages it used
to send to its background worker; the dispatch gateway answers with the
response envelope. The HTTP status is always 200: success or failure lives in
the envelope's ``success`` field.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body

from localstore.gateway.actions import action_name
from localstore.gateway.dispatcher import get_dispatcher

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/messages")
async def post_message(message: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Dispatch one request message."""
    response = await get_dispatcher().dispatch(message)
    if response.get("success") is False:
        logger.info(f"Message {action_name(message)!r} rejected: {response.get('error')}")
    return response
