from __future__ import annotations
import json
import time
from datetime import datetime
from typing import Any, Dict, Optional

from ..config import REPORTS_DIR
from ..snapshot import load_state
from ..state import AggregateState
from ..store import RedisStore
from ..workers.metrics import conversion_rate_label, section_frame
from ..workers.session_log import sessions_frame


def build_report(state: AggregateState, now: Optional[float] = None) -> Dict[str, Any]:
    now = time.time() if now is None else now
    return {
        "exportDate": datetime.fromtimestamp(now).isoformat(timespec="seconds"),
        "sessions": [s.model_dump(by_alias=True) for s in state.sessions],
        "metrics": {
            "totalSessions": len(state.sessions),
            "totalConfusionEvents": state.total_confusion_events,
            "totalHelpTriggered": state.total_help_triggered,
            "conversionRate": conversion_rate_label(state),
            "sectionMetrics": {k: m.model_dump(by_alias=True) for k, m in state.sections.items()},
        },
    }


def main():
    state = load_state(RedisStore())
    stamp = int(time.time() * 1000)
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)

    path = REPORTS_DIR / f"eye-tracking-report-{stamp}.json"
    path.write_text(json.dumps(build_report(state), indent=2))
    print(f"[report] wrote {len(state.sessions)} sessions → {path}")

    sec_path = REPORTS_DIR / f"sections-{stamp}.csv"
    section_frame(state).to_csv(sec_path)
    print(f"[report] wrote section table → {sec_path}")

    if state.sessions:
        sess_path = REPORTS_DIR / f"sessions-{stamp}.parquet"
        sessions_frame(state).to_parquet(sess_path, engine="pyarrow", index=False)
        print(f"[report] wrote sessions → {sess_path}")


if __name__ == "__main__":
    main()
