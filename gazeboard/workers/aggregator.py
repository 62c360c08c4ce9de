from __future__ import annotations
import logging
import math
import numbers
import threading
import time
from collections import deque
from typing import Deque, List, Optional, Tuple

from ..config import LOG_SIZE, SECTIONS
from ..events import (ConfusionEvent, DwellEvent, Event, GazePoint, HelpEvent,
                      SessionCompleteEvent)
from ..snapshot import STATE_KEY, clear_state, load_state, save_state
from ..state import AggregateState, LogEntry, SessionRecord, empty_state
from ..store import BlobStore
from .session_log import append_session

logger = logging.getLogger(__name__)


def _finite(v) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool) and math.isfinite(v)


class MetricsAggregator:
    """
    Single writer of the aggregate state.

    Every accepted mutation is followed by a best-effort snapshot write to the
    injected store. Events are trusted to arrive exactly once: replaying one
    counts it twice.
    """

    def __init__(self, store: Optional[BlobStore] = None, state: Optional[AggregateState] = None,
                 state_key: str = STATE_KEY, log_size: int = LOG_SIZE):
        self.store = store
        self.state_key = state_key
        self.state = state if state is not None else empty_state()
        self.gaze_points: List[GazePoint] = []
        self.log: Deque[LogEntry] = deque(maxlen=log_size)
        self._lock = threading.RLock()

    @classmethod
    def restore(cls, store: BlobStore, state_key: str = STATE_KEY) -> "MetricsAggregator":
        return cls(store=store, state=load_state(store, state_key), state_key=state_key)

    # ---------- helpers ----------

    def _persist(self):
        if self.store is not None:
            save_state(self.store, self.state, self.state_key)

    def add_log(self, action: str, section: str, severity: str = "info"):
        with self._lock:
            self.log.append(LogEntry(action=action, section=section, severity=severity, at=time.time()))

    @staticmethod
    def _known(section: str) -> bool:
        return section in SECTIONS

    # ---------- event operations ----------

    def record_gaze(self, x: float, y: float, captured_at: Optional[float] = None) -> bool:
        captured_at = time.time() if captured_at is None else captured_at
        if not all(_finite(v) for v in (x, y, captured_at)):
            logger.info("non-finite gaze point ignored: %r, %r", x, y)
            return False
        pt = GazePoint(x=x, y=y, captured_at=captured_at)
        with self._lock:
            self.gaze_points.append(pt)
        return True

    def record_dwell(self, section: str, dwell_ms: float) -> bool:
        # unknown sections are ignored: the page may track more than we report
        if not self._known(section) or not _finite(dwell_ms) or dwell_ms < 0:
            return False
        add = int(round(dwell_ms))
        with self._lock:
            m = self.state.sections[section]
            m.visits += 1
            m.total_dwell_ms += add
            self._persist()
        return True

    def record_confusion(self, section: str) -> bool:
        if not self._known(section):
            logger.info("confusion for unknown section %r ignored", section)
            return False
        with self._lock:
            self.state.sections[section].confusion_count += 1
            self.state.total_confusion_events += 1
            self.add_log("Confusion Detected", section, "warning")
            self._persist()
        return True

    def record_help_triggered(self, section: str) -> bool:
        if not self._known(section):
            logger.info("help for unknown section %r ignored", section)
            return False
        with self._lock:
            self.state.sections[section].help_triggered_count += 1
            self.state.total_help_triggered += 1
            self.add_log("Help Shown", section, "success")
            self._persist()
        return True

    def record_session_complete(self, duration_seconds: float, completed: bool) -> Optional[SessionRecord]:
        if not _finite(duration_seconds) or duration_seconds < 0:
            logger.info("session with invalid duration %r ignored", duration_seconds)
            return None
        with self._lock:
            rec = append_session(self.state, duration_seconds, completed)
            self.add_log("Session Complete", f"{duration_seconds:g}s", "success")
            self._persist()
        return rec

    def reset(self):
        """Destructive. Callers are expected to have confirmed with the user."""
        with self._lock:
            self.state = empty_state()
            self.gaze_points.clear()
            self.log.clear()
            if self.store is not None:
                clear_state(self.store, self.state_key)
            self._persist()
            self.add_log("Data Reset", "System", "warning")

    def replace_state(self, state: AggregateState):
        """Swap in a whole state (sample data, imports). Gaze points and log are kept."""
        with self._lock:
            self.state = state
            self._persist()

    def handle(self, event: Event) -> bool:
        """
        Apply one event. Returns False if it was ignored. Never raises: a poison
        event is logged and dropped so later events still apply.
        """
        try:
            if isinstance(event, GazePoint):
                return self.record_gaze(event.x, event.y, event.captured_at)
            elif isinstance(event, DwellEvent):
                return self.record_dwell(event.section, event.dwell_ms)
            elif isinstance(event, ConfusionEvent):
                return self.record_confusion(event.section)
            elif isinstance(event, HelpEvent):
                return self.record_help_triggered(event.section)
            elif isinstance(event, SessionCompleteEvent):
                return self.record_session_complete(event.duration_seconds, event.completed) is not None
            else:
                logger.info("ignoring event of unknown kind: %r", getattr(event, "kind", event))
                return False
        except Exception:
            logger.exception("failed to apply event %r", event)
            return False

    # ---------- read-only snapshots ----------

    def snapshot(self) -> AggregateState:
        with self._lock:
            return self.state.model_copy(deep=True)

    def gaze_snapshot(self) -> Tuple[GazePoint, ...]:
        with self._lock:
            return tuple(self.gaze_points)

    def log_snapshot(self) -> List[LogEntry]:
        # newest first, like the dashboard list
        with self._lock:
            return list(reversed(self.log))
