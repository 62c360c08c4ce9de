from __future__ import annotations
import time
from typing import Optional

import pandas as pd

from ..state import AggregateState, SessionRecord

SESSION_COLUMNS = [
    "id", "durationSeconds", "confusionEventsAtCompletion",
    "helpTriggeredAtCompletion", "completed", "completedAt",
]


def next_session_id(state: AggregateState, now: float) -> int:
    # ms timestamp, bumped so ids stay strictly increasing
    sid = int(now * 1000)
    if state.sessions and sid <= state.sessions[-1].id:
        sid = state.sessions[-1].id + 1
    return sid


def append_session(state: AggregateState, duration_seconds: float, completed: bool,
                   now: Optional[float] = None) -> SessionRecord:
    """
    Freeze the current global confusion/help totals into a new record and append it.
    Records are immutable; the log only ever grows (until reset).
    """
    now = time.time() if now is None else now
    rec = SessionRecord(
        id=next_session_id(state, now),
        duration_seconds=float(duration_seconds),
        confusion_events_at_completion=state.total_confusion_events,
        help_triggered_at_completion=state.total_help_triggered,
        completed=bool(completed),
        completed_at=now,
    )
    state.sessions.append(rec)
    if rec.completed:
        state.conversion_count += 1
    return rec


def sessions_frame(state: AggregateState) -> pd.DataFrame:
    rows = [s.model_dump(by_alias=True) for s in state.sessions]
    return pd.DataFrame(rows, columns=SESSION_COLUMNS)
