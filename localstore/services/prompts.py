"""Prompt library CRUD over ``LocalStore.prompts``."""
from __future__ import annotations

import logging
import uuid
from copy import deepcopy

from localstore.contracts.json_types import JSONValue, PromptRecord
from localstore.core.state_store import LocalStore

logger = logging.getLogger(__name__)


def generate_prompt_id() -> str:
    """Generate a new prompt UUID string."""
    return str(uuid.uuid4())


def get_prompts(store: LocalStore) -> list[PromptRecord]:
    """Return a copy of every stored prompt, in stored order."""
    return deepcopy(store.prompts)


def save_prompt(store: LocalStore, prompt: PromptRecord) -> PromptRecord:
    """
    Insert or replace a prompt.

    The caller's dict is never mutated: the store keeps its own copy. A prompt
    without an ``id`` gets a fresh UUID. An existing id is replaced in place
    (position kept); a new one is appended.

    Returns:
        A copy of the stored prompt, including its (possibly new) id
    """
    stored = deepcopy(prompt)
    if not stored.get("id"):
        stored["id"] = generate_prompt_id()

    prompt_id = stored["id"]
    for index, existing in enumerate(store.prompts):
        if existing.get("id") == prompt_id:
            store.prompts[index] = stored
            logger.debug(f"Updated prompt {prompt_id}")
            break
    else:
        store.prompts.append(stored)
        logger.debug(f"Added prompt {prompt_id}")

    store.mark_changed()
    return deepcopy(stored)


def delete_prompt(store: LocalStore, prompt_id: JSONValue) -> None:
    """Remove every prompt with ``prompt_id``.  Deleting an unknown id is not an error."""
    before = len(store.prompts)
    store.prompts = [p for p in store.prompts if p.get("id") != prompt_id]
    logger.debug(f"Deleted {before - len(store.prompts)} prompt(s) with id {prompt_id!r}")
    store.mark_changed()
