from __future__ import annotations
import time, random
from typing import List, Dict

from ..config import SECTIONS

# rough on-screen boxes (x0, y0, x1, y1) of each section on a 900x500 checkout page
LAYOUT = {
    "items": (20, 20, 430, 240),
    "summary": (470, 20, 880, 240),
    "paymentMethods": (20, 260, 430, 480),
    "checkoutDetails": (470, 260, 880, 480),
}

def _now(): return time.time()

def _gaze(section, n, t0, step=0.05, jitter=1.0) -> List[Dict]:
    x0, y0, x1, y1 = LAYOUT[section]
    cx, cy = (x0 + x1) / 2, (y0 + y1) / 2
    sx, sy = (x1 - x0) / 4 * jitter, (y1 - y0) / 4 * jitter
    return [{"kind": "gazePoint", "x": random.gauss(cx, sx), "y": random.gauss(cy, sy), "capturedAt": t0 + i * step}
            for i in range(n)]

def smooth_buyer() -> List[Dict]:
    """Reads each section once, no confusion, converts."""
    t = _now(); ev = []
    for s in SECTIONS:
        ev += _gaze(s, 40, t)
        ev.append({"kind": "dwellTime", "section": s, "dwellTime": random.randint(3000, 7000)})
        t += 5
    ev.append({"kind": "sessionComplete", "completionTime": random.randint(30, 45), "conversationCompleted": True})
    return ev

def confused_buyer() -> List[Dict]:
    """Lingers on payment, gets help, still converts."""
    t = _now(); ev = []
    for s in SECTIONS:
        n = 120 if s == "paymentMethods" else 30
        ev += _gaze(s, n, t, jitter=1.6 if s == "paymentMethods" else 1.0)
        ev.append({"kind": "dwellTime", "section": s, "dwellTime": random.randint(4000, 9000) * (3 if s == "paymentMethods" else 1)})
        if s == "paymentMethods":
            ev.append({"kind": "confusionEvent", "section": s})
            ev.append({"kind": "helpTriggered", "section": s, "beforeDwellTime": 12000})
        t += 8
    ev.append({"kind": "sessionComplete", "completionTime": random.randint(50, 70), "conversationCompleted": True})
    return ev

def abandoner() -> List[Dict]:
    """Revisits checkout details, confused twice, leaves."""
    t = _now(); ev = []
    for s in ("items", "checkoutDetails", "summary", "checkoutDetails"):
        ev += _gaze(s, 50, t)
        ev.append({"kind": "dwellTime", "section": s, "dwellTime": random.randint(2000, 6000)})
        if s == "checkoutDetails":
            ev.append({"kind": "confusionEvent", "section": s})
        t += 6
    ev.append({"kind": "helpTriggered", "section": "checkoutDetails"})
    ev.append({"kind": "sessionComplete", "completionTime": random.randint(20, 40), "conversationCompleted": False})
    return ev
