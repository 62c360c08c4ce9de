from __future__ import annotations
import json
import logging
from typing import Any, Iterable

from ..config import DEFAULTS
from ..events import parse_event
from ..store import BlobStore
from .aggregator import MetricsAggregator

logger = logging.getLogger(__name__)

EVENTS_KEY = DEFAULTS["events_key"]


def replay(agg: MetricsAggregator, records: Iterable[Any]) -> dict:
    """
    Apply a stored batch in order. Unknown kinds and malformed records are
    skipped; one bad record never fails the batch.
    """
    applied = skipped = 0
    for raw in records:
        ev = parse_event(raw)
        if ev is not None and agg.handle(ev):
            applied += 1
        else:
            skipped += 1
    return {"applied": applied, "skipped": skipped}


def drain(agg: MetricsAggregator, store: BlobStore, key: str = EVENTS_KEY) -> dict:
    """
    Replay whatever batch the checkout page left in the store, then try to remove
    it so a later run does not apply it twice. A failed remove does not undo the
    replay.
    """
    try:
        raw = store.get(key)
    except Exception as e:
        logger.warning("could not read stored events %r: %r", key, e)
        return {"applied": 0, "skipped": 0, "cleared": False}
    if not raw:
        return {"applied": 0, "skipped": 0, "cleared": False}

    try:
        batch = json.loads(raw)
    except ValueError as e:
        logger.warning("stored events %r are not JSON: %s", key, e)
        return {"applied": 0, "skipped": 0, "cleared": False}
    if not isinstance(batch, list) or not batch:
        return {"applied": 0, "skipped": 0, "cleared": False}

    out = replay(agg, batch)

    cleared = True
    try:
        store.remove(key)
    except Exception as e:
        cleared = False
        logger.warning("could not clear stored events %r: %r", key, e)

    agg.add_log("Stored Events Loaded", "System", "info")
    out["cleared"] = cleared
    logger.info("replayed %d stored events (%d skipped)", out["applied"], out["skipped"])
    return out
