from __future__ import annotations
import logging
from typing import Optional

from pydantic import ValidationError

from .config import DEFAULTS
from .state import AggregateState, empty_state
from .store import BlobStore

logger = logging.getLogger(__name__)

STATE_KEY = DEFAULTS["state_key"]


def serialize(state: AggregateState) -> bytes:
    return state.model_dump_json(by_alias=True).encode("utf-8")


def deserialize(raw: Optional[bytes]) -> AggregateState:
    """Never fails: missing or malformed snapshots give the empty state."""
    if not raw:
        return empty_state()
    try:
        return AggregateState.model_validate_json(raw)
    except (ValidationError, ValueError) as e:
        logger.warning("discarding unreadable snapshot (%d bytes): %s", len(raw), e)
        return empty_state()


# ---------- best-effort store access ----------

def load_state(store: BlobStore, key: str = STATE_KEY) -> AggregateState:
    try:
        raw = store.get(key)
    except Exception as e:
        logger.warning("snapshot read failed for %r: %r", key, e)
        return empty_state()
    return deserialize(raw)


def save_state(store: BlobStore, state: AggregateState, key: str = STATE_KEY) -> bool:
    try:
        store.set(key, serialize(state))
        return True
    except Exception as e:
        logger.warning("snapshot write failed for %r: %r", key, e)
        return False


def clear_state(store: BlobStore, key: str = STATE_KEY) -> bool:
    try:
        store.remove(key)
        return True
    except Exception as e:
        logger.warning("snapshot remove failed for %r: %r", key, e)
        return False
