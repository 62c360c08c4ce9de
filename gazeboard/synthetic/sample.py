from __future__ import annotations
import random
import time

from ..state import AggregateState, SectionMetric, SessionRecord
from ..workers.aggregator import MetricsAggregator


def sample_state(now: float) -> AggregateState:
    sessions = [
        SessionRecord(id=1, duration_seconds=45, confusion_events_at_completion=2,
                      help_triggered_at_completion=1, completed=True, completed_at=now - 3600),
        SessionRecord(id=2, duration_seconds=52, confusion_events_at_completion=3,
                      help_triggered_at_completion=2, completed=True, completed_at=now - 2700),
        SessionRecord(id=3, duration_seconds=38, confusion_events_at_completion=1,
                      help_triggered_at_completion=1, completed=True, completed_at=now - 1800),
    ]
    return AggregateState(
        sections={
            "items": SectionMetric(visits=3, total_dwell_ms=12000),
            "summary": SectionMetric(visits=3, total_dwell_ms=8000, confusion_count=1, help_triggered_count=1),
            "paymentMethods": SectionMetric(visits=3, total_dwell_ms=15000, confusion_count=2, help_triggered_count=1),
            "checkoutDetails": SectionMetric(visits=3, total_dwell_ms=25000, confusion_count=3, help_triggered_count=2),
        },
        total_confusion_events=6,
        total_help_triggered=4,
        conversion_count=3,
        sessions=sessions,
    )


def load_sample_data(agg: MetricsAggregator, points: int = 200, width: int = 900, height: int = 500,
                     seed=None):
    """Demo dashboard: fixed sessions and section figures plus random gaze points."""
    rnd = random.Random(seed)
    now = time.time()
    agg.replace_state(sample_state(now))
    for _ in range(points):
        agg.record_gaze(rnd.random() * width, rnd.random() * height, now)
    agg.add_log("Sample Data Loaded", "System", "info")
