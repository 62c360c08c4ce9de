from __future__ import annotations
import math
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from ..config import SECTIONS
from ..state import AggregateState

# Help impact is a heuristic proxy, not a measured effect: we assume a shown help
# prompt removes roughly 30% of the confusion it responds to. There is no study
# behind the number; keep it named so it can be replaced.
ASSUMED_CONFUSION_REDUCTION = 0.3

SECTION_COLUMNS = ["visits", "totalDwellMs", "avgDwellMs", "confusionCount",
                   "helpTriggeredCount", "helpShown", "dwellShare"]


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def average_session_duration(state: AggregateState) -> Optional[float]:
    if not state.sessions:
        return None
    return float(np.mean([s.duration_seconds for s in state.sessions]))


def conversion_rate(state: AggregateState) -> float:
    if not state.sessions:
        return 0.0
    return state.conversion_count / len(state.sessions)


def conversion_percent(state: AggregateState) -> int:
    return round_half_up(conversion_rate(state) * 100)


def conversion_rate_label(state: AggregateState) -> str:
    # export format: two decimals, "0%" when nothing to divide by
    if not state.sessions:
        return "0%"
    return f"{conversion_rate(state) * 100:.2f}%"


def section_average_dwell(state: AggregateState, section: str) -> Optional[float]:
    m = state.sections.get(section)
    if m is None or m.visits == 0:
        return None
    return m.total_dwell_ms / m.visits


def section_frame(state: AggregateState) -> pd.DataFrame:
    """Per-section table for the dwell chart and revisit table."""
    df = pd.DataFrame(
        [state.sections[s].model_dump(by_alias=True) for s in SECTIONS],
        index=pd.Index(SECTIONS, name="section"),
    )
    df["avgDwellMs"] = np.where(df["visits"] > 0, df["totalDwellMs"] / df["visits"].clip(lower=1), np.nan)
    df["helpShown"] = df["helpTriggeredCount"] > 0
    busiest = df["totalDwellMs"].max() or 1
    df["dwellShare"] = df["totalDwellMs"] / busiest * 100.0
    return df[SECTION_COLUMNS]


def section_records(state: AggregateState) -> Dict[str, Dict[str, Any]]:
    df = section_frame(state).astype(object)
    df = df.where(df.notna(), None)
    return df.to_dict(orient="index")


def help_impact(state: AggregateState) -> Dict[str, Any]:
    total_confusion = sum(m.confusion_count for m in state.sections.values())
    total_help = state.total_help_triggered
    ratio = total_help / max(1, total_confusion)
    percent = round_half_up(ratio * 100) if total_help > 0 else 0

    if percent > 50:
        message = "Help feature significantly improved user experience!"
    elif percent > 0:
        message = "Help feature has provided assistance to users."
    else:
        message = "No help events recorded yet."

    return {
        "improvement": min(ratio, 1.0),
        "improvementPercent": percent,
        "sectionsWithConfusion": int(sum(1 for m in state.sections.values() if m.confusion_count > 0)),
        "confusionBeforeHelp": total_confusion,
        "helpShown": total_help,
        "estimatedConfusionAfterHelp": max(0, total_confusion - round_half_up(total_confusion * ASSUMED_CONFUSION_REDUCTION)),
        "message": message,
    }


def dashboard(state: AggregateState) -> Dict[str, Any]:
    avg = average_session_duration(state)
    return {
        "avgTime": None if avg is None else round_half_up(avg),
        "confusionCount": state.total_confusion_events,
        "conversionRate": conversion_percent(state),
        "sessionCount": len(state.sessions),
    }
