"""Find services that share drifted config keys."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from itertools import combinations
from pathlib import Path
from typing import Any, Iterable

from .models import CompareResult


@dataclass
class CorrelationEntry:
    """A pair of services with shared drift keys."""

    service_a: str
    service_b: str
    shared_keys: list[str]
    shared_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_a": self.service_a,
            "service_b": self.service_b,
            "shared_keys": list(self.shared_keys),
            "shared_count": self.shared_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CorrelationEntry:
        return cls(
            service_a=data.get("service_a", ""),
            service_b=data.get("service_b", ""),
            shared_keys=list(data.get("shared_keys") or []),
            shared_count=int(data.get("shared_count", 0)),
        )


@dataclass
class CorrelationReport:
    """All correlated service pairs."""

    pairs: list[CorrelationEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"pairs": [p.to_dict() for p in self.pairs]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CorrelationReport:
        return cls(pairs=[CorrelationEntry.from_dict(p) for p in data.get("pairs") or []])


def build_correlation(results: Iterable[CompareResult]) -> CorrelationReport:
    """Find every pair of drifted services that share at least one drifted key."""
    service_keys = {r.service: {d.key for d in r.diffs} for r in results if r.diffs}
    pairs = []
    for a, b in combinations(sorted(service_keys), 2):
        shared = sorted(service_keys[a] & service_keys[b])
        if shared:
            pairs.append(CorrelationEntry(a, b, shared, len(shared)))
    return CorrelationReport(pairs=pairs)


def format_correlation(report: CorrelationReport) -> str:
    """Return a human-readable summary of the correlation report."""
    if not report.pairs:
        return "No correlated drift found across services.\n"
    lines = [f"Correlated drift pairs: {len(report.pairs)}\n\n"]
    for p in report.pairs:
        lines.append(
            f"  {p.service_a} <-> {p.service_b} ({p.shared_count} shared key(s)): "
            f"{', '.join(p.shared_keys)}\n"
        )
    return "".join(lines)


def save_correlation(path: str | Path, report: CorrelationReport) -> None:
    """Write a correlation report to a JSON file."""
    Path(path).write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")


def load_correlation(path: str | Path) -> CorrelationReport:
    """Read a correlation report; a missing file gives an empty report."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return CorrelationReport()
    return CorrelationReport.from_dict(json.loads(text))


def top_correlated(report: CorrelationReport, n: int) -> list[CorrelationEntry]:
    """Return the top n pairs by shared key count, ties kept in report order."""
    if n < 0:
        raise ValueError(f"n must not be negative, got {n}")
    ranked = sorted(report.pairs, key=lambda p: p.shared_count, reverse=True)
    return ranked[:n]