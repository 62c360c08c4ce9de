from fastapi import FastAPI, Body, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from functools import lru_cache
from typing import Any, Dict, List, Union

from .config import DEFAULTS
from .events import parse_event
from .heatmap import density_field, encode_png, normalize, colorize, peak_cell
from .store import RedisStore
from .analysis.report import build_report
from .synthetic.sample import load_sample_data
from .workers.aggregator import MetricsAggregator
from .workers.drain_once import drain
from .workers.metrics import dashboard, help_impact, section_records

app = FastAPI(title="GazeBoard API", version="0.1.0")

# CORS so the checkout page can POST events
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],             # tighten later
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Connect to Redis lazily, once, on first request
@lru_cache(maxsize=1)
def get_store() -> RedisStore:
    return RedisStore()

@lru_cache(maxsize=1)
def _aggregator() -> MetricsAggregator:
    store = get_store()
    agg = MetricsAggregator.restore(store)
    # pick up anything the page buffered while we were down
    drain(agg, store)
    return agg

def get_aggregator() -> MetricsAggregator:
    return _aggregator()

@app.get("/health")
def health(store=Depends(get_store)):
    return {"ok": True, "service": "gazeboard-api", "redis": store.ping()}

@app.post("/ingest")
def ingest(payload: Union[Dict[str, Any], List[Any]] = Body(...), agg: MetricsAggregator = Depends(get_aggregator)):
    """
    Accept either a single event object or a list of events.
    Malformed or unknown events are counted as skipped, never rejected.
    """
    items = payload if isinstance(payload, list) else [payload]
    accepted = 0
    for raw in items:
        ev = parse_event(raw)
        if ev is not None and agg.handle(ev):
            accepted += 1
    return {"status": "applied", "accepted": accepted, "skipped": len(items) - accepted}

@app.post("/replay")
def replay_stored(agg: MetricsAggregator = Depends(get_aggregator), store=Depends(get_store)):
    return drain(agg, store)

@app.get("/metrics")
def metrics(agg: MetricsAggregator = Depends(get_aggregator)):
    state = agg.snapshot()
    return {**dashboard(state), "helpImpact": help_impact(state)}

@app.get("/sections")
def sections(agg: MetricsAggregator = Depends(get_aggregator)):
    return section_records(agg.snapshot())

@app.get("/sessions")
def sessions(agg: MetricsAggregator = Depends(get_aggregator)):
    return [s.model_dump(by_alias=True) for s in agg.snapshot().sessions]

@app.get("/log")
def event_log(agg: MetricsAggregator = Depends(get_aggregator)):
    return [e.model_dump(by_alias=True) for e in agg.log_snapshot()]

@app.get("/heatmap")
def heatmap(
    width: int = Query(DEFAULTS["heatmap_width"], ge=1, le=4096),
    height: int = Query(DEFAULTS["heatmap_height"], ge=1, le=4096),
    radius: int = Query(DEFAULTS["heatmap_radius"], ge=1, le=256),
    agg: MetricsAggregator = Depends(get_aggregator),
):
    # sync endpoint: runs in the threadpool over an immutable copy of the points
    points = agg.gaze_snapshot()
    field = density_field(points, width, height, radius)
    px, py = peak_cell(field)
    png = encode_png(colorize(normalize(field)))
    return Response(content=png, media_type="image/png",
                    headers={"X-Gaze-Points": str(len(points)), "X-Heatmap-Peak": f"{px},{py}"})

@app.get("/export")
def export(agg: MetricsAggregator = Depends(get_aggregator)):
    return build_report(agg.snapshot())

@app.post("/reset")
def reset(confirm: bool = Query(False), agg: MetricsAggregator = Depends(get_aggregator)):
    if not confirm:
        return JSONResponse(status_code=400, content={"error": "reset discards all analytics; pass confirm=true"})
    agg.reset()
    return {"status": "reset"}

@app.post("/sample")
def sample(agg: MetricsAggregator = Depends(get_aggregator)):
    load_sample_data(agg)
    return {"status": "loaded", "sessions": len(agg.snapshot().sessions)}
