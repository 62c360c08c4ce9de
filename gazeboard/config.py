from __future__ import annotations
import os
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]
REPORTS_DIR = REPO / "data" / "reports"

# Sections the checkout page reports on; anything else is ignored.
SECTIONS = ("items", "summary", "paymentMethods", "checkoutDetails")

LOG_SIZE = 20

DEFAULTS = {
    "redis_host": os.environ.get("GAZEBOARD_REDIS_HOST", "localhost"),
    "redis_port": int(os.environ.get("GAZEBOARD_REDIS_PORT", "6379")),
    "redis_db": int(os.environ.get("GAZEBOARD_REDIS_DB", "0")),
    "state_key": os.environ.get("GAZEBOARD_STATE_KEY", "eyeTrackingAnalytics"),
    "events_key": os.environ.get("GAZEBOARD_EVENTS_KEY", "eyeTrackingEvents"),
    "ingest_url": os.environ.get("GAZEBOARD_INGEST_URL", "http://127.0.0.1:8123/ingest"),
    "heatmap_width": 900,
    "heatmap_height": 500,
    "heatmap_radius": 30,
}
