from gazeboard.events import parse_event
from gazeboard.synthetic.personas import abandoner, confused_buyer, smooth_buyer
from gazeboard.synthetic.sample import load_sample_data
from gazeboard.workers.aggregator import MetricsAggregator
from gazeboard.workers.drain_once import replay

def test_personas_are_valid_events():
    for persona in (smooth_buyer, confused_buyer, abandoner):
        assert all(parse_event(ev) is not None for ev in persona())

def test_personas_replay():
    agg = MetricsAggregator()
    out = replay(agg, smooth_buyer() + confused_buyer() + abandoner())
    assert out["skipped"] == 0
    s = agg.state
    assert len(s.sessions) == 3 and s.conversion_count == 2
    assert s.sections["checkoutDetails"].visits == 4
    assert s.total_confusion_events == 3 and s.total_help_triggered == 2

def test_sample_data():
    agg = MetricsAggregator()
    load_sample_data(agg, points=50, seed=1)
    assert len(agg.gaze_snapshot()) == 50
    assert agg.state.conversion_count == 3
    assert agg.log_snapshot()[0].action == "Sample Data Loaded"

def test_seed_posts_every_persona(monkeypatch):
    from gazeboard.synthetic import seed_personas
    sent = []
    def fake_post(events, url=None):
        sent.extend(events)
        return {"accepted": len(events), "skipped": 0}
    monkeypatch.setattr(seed_personas, "post_events", fake_post)
    accepted, skipped = seed_personas.seed()
    assert accepted == len(sent) > 0 and skipped == 0
    assert sum(1 for ev in sent if ev["kind"] == "sessionComplete") == 3
