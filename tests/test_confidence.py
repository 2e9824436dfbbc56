from datetime import datetime, timedelta, timezone

from driftwatch.confidence import (
    ConfidenceLevel,
    format_confidence,
    score_confidence,
)
from driftwatch.models import CompareResult, Diff, HistoryEntry


def make_results():
    return [
        CompareResult(
            "api-gateway",
            [
                Diff(key="replicas", expected="3", actual="1"),
                Diff(key="timeout", expected="30s", actual="10s"),
            ],
        ),
        CompareResult("auth-service", [Diff(key="env", expected="prod", actual="staging")]),
        CompareResult("clean-service", []),
    ]


def make_history(service, count):
    now = datetime.now(timezone.utc)
    return [
        HistoryEntry(
            timestamp=now - timedelta(hours=i),
            results=[CompareResult(service, [Diff(key="k", expected="a", actual="b")])],
        )
        for i in range(count)
    ]


def test_score_confidence_skips_clean():
    out = score_confidence(make_results(), None)
    assert "clean-service" not in {r.service for r in out}
    assert len(out) == 2


def test_score_confidence_high_with_history():
    diffs = [Diff(key=f"k{i}", expected="a", actual="b") for i in range(5)]
    out = score_confidence([CompareResult("api-gateway", diffs)], make_history("api-gateway", 5))
    assert len(out) == 1
    assert out[0].level == ConfidenceLevel.HIGH
    assert out[0].score >= 0.65


def test_score_confidence_history_raises_level():
    without = {r.service: r for r in score_confidence(make_results(), None)}
    with_hist = {
        r.service: r
        for r in score_confidence(make_results(), make_history("api-gateway", 5))
    }
    assert with_hist["api-gateway"].score > without["api-gateway"].score
    assert with_hist["api-gateway"].level == ConfidenceLevel.MEDIUM


def test_score_confidence_low_with_no_history():
    out = score_confidence(
        [CompareResult("new-svc", [Diff(key="x", expected="1", actual="2")])], None
    )
    assert len(out) == 1
    assert out[0].level == ConfidenceLevel.LOW
    assert out[0].drift_count == 1


def test_score_confidence_sorted_by_score():
    out = score_confidence(make_results(), make_history("auth-service", 6))
    scores = [r.score for r in out]
    assert scores == sorted(scores, reverse=True)
    assert out[0].service == "auth-service"


def test_score_is_capped_at_one():
    diffs = [Diff(key=f"k{i}", expected="a", actual="b") for i in range(20)]
    out = score_confidence([CompareResult("big", diffs)], make_history("big", 9))
    assert out[0].score == 1.0
    assert out[0].level == ConfidenceLevel.HIGH


def test_reason_mentions_counts():
    out = score_confidence(make_results(), make_history("auth-service", 2))
    auth = next(r for r in out if r.service == "auth-service")
    assert auth.reason.startswith("1 diffs detected, seen drifting 2 time(s)")


def test_format_confidence_contains_service():
    formatted = format_confidence(score_confidence(make_results(), None))
    assert formatted.startswith("drift confidence scores:\n")
    assert "api-gateway" in formatted
    assert "score=" in formatted


def test_format_confidence_empty():
    assert format_confidence(None) == "no drifted services to score\n"