import math
from gazeboard.workers.aggregator import MetricsAggregator
from gazeboard.workers.metrics import (
    ASSUMED_CONFUSION_REDUCTION, average_session_duration, conversion_percent, conversion_rate,
    conversion_rate_label, dashboard, help_impact, section_average_dwell, section_frame, section_records,
)
from gazeboard.state import empty_state
from gazeboard.synthetic.sample import sample_state

def test_empty_state_sentinels():
    s = empty_state()
    assert average_session_duration(s) is None
    assert conversion_rate(s) == 0.0
    assert conversion_rate_label(s) == "0%"
    assert section_average_dwell(s, "items") is None
    assert dashboard(s) == {"avgTime": None, "confusionCount": 0, "conversionRate": 0, "sessionCount": 0}

def test_conversion_two_of_three():
    agg = MetricsAggregator()
    for done in (True, True, False):
        agg.record_session_complete(30, done)
    assert math.isclose(conversion_rate(agg.state), 2 / 3)
    assert conversion_percent(agg.state) == 67
    assert conversion_rate_label(agg.state) == "66.67%"

def test_average_duration_and_dwell():
    agg = MetricsAggregator()
    agg.record_session_complete(40, True)
    agg.record_session_complete(51, False)
    agg.record_dwell("summary", 3000)
    agg.record_dwell("summary", 1000)
    assert average_session_duration(agg.state) == 45.5
    assert dashboard(agg.state)["avgTime"] == 46
    assert section_average_dwell(agg.state, "summary") == 2000

def test_help_impact_is_capped():
    agg = MetricsAggregator()
    agg.record_confusion("items")
    for _ in range(3):
        agg.record_help_triggered("items")
    hi = help_impact(agg.state)
    assert hi["improvement"] == 1.0
    assert hi["improvementPercent"] == 300
    assert hi["message"].startswith("Help feature significantly")

def test_help_impact_sample_numbers():
    hi = help_impact(sample_state(0.0))
    assert math.isclose(hi["improvement"], 4 / 6)
    assert hi["sectionsWithConfusion"] == 3
    assert hi["confusionBeforeHelp"] == 6
    assert hi["estimatedConfusionAfterHelp"] == 6 - round(6 * ASSUMED_CONFUSION_REDUCTION)

def test_help_impact_nothing_recorded():
    hi = help_impact(empty_state())
    assert hi["improvement"] == 0.0 and hi["improvementPercent"] == 0
    assert hi["message"] == "No help events recorded yet."

def test_section_frame_shares():
    df = section_frame(sample_state(0.0))
    assert df.loc["checkoutDetails", "dwellShare"] == 100.0
    assert df.loc["items", "avgDwellMs"] == 4000
    assert not df.loc["items", "helpShown"]

def test_section_records_json_friendly():
    recs = section_records(empty_state())
    assert recs["items"]["avgDwellMs"] is None
    assert recs["items"]["dwellShare"] == 0.0

def test_reset_views_match_empty():
    agg = MetricsAggregator()
    agg.record_confusion("items")
    agg.record_help_triggered("items")
    agg.record_session_complete(10, True)
    agg.reset()
    e = empty_state()
    assert dashboard(agg.state) == dashboard(e)
    assert help_impact(agg.state) == help_impact(e)
    assert section_records(agg.state) == section_records(e)
