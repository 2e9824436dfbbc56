"""Saved snapshots of drift results and comparison against them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .models import CompareResult, format_timestamp, parse_timestamp


@dataclass
class Baseline:
    """A saved snapshot of drift results."""

    created_at: datetime | None = None
    results: list[CompareResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "created_at": format_timestamp(self.created_at),
            "results": [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Baseline:
        return cls(
            created_at=parse_timestamp(data.get("created_at")),
            results=[CompareResult.from_dict(r) for r in data.get("results") or []],
        )


def save_baseline(path: str | Path, results: Iterable[CompareResult]) -> None:
    """Write the given results as a baseline JSON file at path."""
    baseline = Baseline(created_at=datetime.now(timezone.utc), results=list(results))
    Path(path).write_text(json.dumps(baseline.to_dict(), indent=2), encoding="utf-8")


def load_baseline(path: str | Path) -> Baseline:
    """Read a previously saved baseline; a missing file raises FileNotFoundError."""
    return Baseline.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))


def diff_baseline(baseline: Baseline, current: Iterable[CompareResult]) -> list[CompareResult]:
    """Return the current results whose drift count differs from the baseline."""
    index = {r.service: r for r in baseline.results}
    changed = []
    for cur in current:
        prev = index.get(cur.service)
        if prev is None or len(cur.diffs) != len(prev.diffs):
            changed.append(cur)
    return changed