"""Confidence scoring for drift results based on size and history."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from .models import CompareResult, HistoryEntry


class ConfidenceLevel(str, Enum):
    """How confident we are that drift is real and significant."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class ConfidenceResult:
    """Confidence scoring for a single service."""

    service: str
    score: float
    level: ConfidenceLevel
    drift_count: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "score": self.score,
            "level": self.level.value,
            "drift_count": self.drift_count,
            "reason": self.reason,
        }


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def _level_from_score(score: float) -> ConfidenceLevel:
    if score >= 0.65:
        return ConfidenceLevel.HIGH
    if score >= 0.35:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def score_confidence(
    results: Iterable[CompareResult], history: Iterable[HistoryEntry] | None
) -> list[ConfidenceResult]:
    """Score each drifted service, highest score first."""
    history_counts = Counter(
        r.service for h in history or [] for r in h.results if r.diffs
    )
    out = []
    for r in results:
        if not r.diffs:
            continue
        hist_freq = history_counts[r.service]
        drift_count = len(r.diffs)
        drift_norm = min(drift_count / 10.0, 1.0)
        hist_norm = min(hist_freq / 5.0, 1.0)
        score = _round2(0.6 * drift_norm + 0.4 * hist_norm)
        level = _level_from_score(score)
        reason = (
            f"{drift_count} diffs detected, seen drifting {hist_freq} time(s) "
            f"historically — confidence {level.value}"
        )
        out.append(ConfidenceResult(r.service, score, level, drift_count, reason))
    out.sort(key=lambda c: c.score, reverse=True)
    return out


def format_confidence(results: Iterable[ConfidenceResult] | None) -> str:
    """Return a human-readable summary of confidence results."""
    lines = [
        f"  {r.service:<30} score={r.score:.2f}  level={r.level.value:<6}  diffs={r.drift_count}\n"
        for r in results or []
    ]
    if not lines:
        return "no drifted services to score\n"
    return "drift confidence scores:\n" + "".join(lines)