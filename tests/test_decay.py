from datetime import datetime, timedelta, timezone

from driftwatch.decay import (
    DecayEntry,
    DecayOptions,
    apply_decay,
    default_decay_options,
    format_decay,
)
from driftwatch.models import CompareResult, Diff, HistoryEntry


def make_decay_results():
    return [
        CompareResult(
            "api",
            [Diff("replicas", "3", "2"), Diff("image", "v1", "v2")],
        ),
        CompareResult("worker", [Diff("memory", "512Mi", "256Mi")]),
        CompareResult("clean-svc", []),
    ]


def make_decay_history(service, days_ago):
    return HistoryEntry(
        service=service,
        timestamp=datetime.now(timezone.utc) - timedelta(hours=days_ago * 24),
    )


def test_default_options():
    opts = default_decay_options()
    assert opts.half_life_days == 7.0
    assert opts.threshold_score == 0.1


def test_apply_decay_skips_clean_services():
    entries = apply_decay(make_decay_results(), None, default_decay_options())
    assert "clean-svc" not in [e.service for e in entries]
    assert len(entries) == 2


def test_apply_decay_full_score_when_no_history():
    results = [CompareResult("api", [Diff("k", "a", "b")])]
    entries = apply_decay(results, None, default_decay_options())
    assert len(entries) == 1
    assert entries[0].score >= 0.99
    assert entries[0].decayed is False


def test_apply_decay_old_history_reduces_score():
    results = [CompareResult("api", [Diff("k", "a", "b")])]
    history = [make_decay_history("api", 14)]
    entries = apply_decay(results, history, default_decay_options())
    assert len(entries) == 1
    assert entries[0].score <= 0.30


def test_apply_decay_one_half_life_halves_score():
    results = [CompareResult("api", [Diff("k", "a", "b")])]
    history = [make_decay_history("api", 7)]
    entries = apply_decay(results, history, default_decay_options())
    assert abs(entries[0].score - 0.5) < 0.001
    assert entries[0].age_days == 7.0


def test_apply_decay_uses_latest_history_entry():
    results = [CompareResult("api", [Diff("k", "a", "b")])]
    history = [make_decay_history("api", 30), make_decay_history("api", 0)]
    entries = apply_decay(results, history, default_decay_options())
    assert entries[0].score >= 0.99


def test_apply_decay_decayed_flag_set():
    results = [CompareResult("old", [Diff("x", "1", "2")])]
    history = [make_decay_history("old", 60)]
    entries = apply_decay(results, history, default_decay_options())
    assert len(entries) == 1
    assert entries[0].decayed is True


def test_apply_decay_sorted_by_score_descending():
    history = [make_decay_history("api", 30), make_decay_history("worker", 0)]
    entries = apply_decay(make_decay_results(), history, default_decay_options())
    assert len(entries) >= 2
    assert entries[0].score >= entries[1].score
    assert entries[0].service == "worker"


def test_apply_decay_non_positive_half_life_uses_default():
    results = [CompareResult("api", [Diff("k", "a", "b")])]
    history = [make_decay_history("api", 7)]
    entries = apply_decay(results, history, DecayOptions(half_life_days=0, threshold_score=0.1))
    assert abs(entries[0].score - 0.5) < 0.001


def test_format_decay_contains_headers():
    entries = apply_decay(make_decay_results(), None, default_decay_options())
    out = format_decay(entries)
    for header in ["SERVICE", "SCORE", "AGE", "DECAYED"]:
        assert header in out


def test_format_decay_row_layout():
    out = format_decay([DecayEntry("api", 1.5, None, 2.0, False)])
    lines = out.splitlines()
    assert len(lines) == 3
    assert lines[2].split() == ["api", "1.500", "2.0", "no"]
    assert len(lines[2]) == 55


def test_format_decay_decayed_yes():
    out = format_decay([DecayEntry("old", 0.01, None, 60.0, True)])
    assert out.splitlines()[2].split()[-1] == "yes"


def test_format_decay_empty():
    assert format_decay(None) == "no active drift decay entries\n"