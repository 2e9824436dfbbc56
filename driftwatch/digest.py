"""Stable hashes of drift results for change detection."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .models import CompareResult, format_timestamp, parse_timestamp


@dataclass
class DigestEntry:
    """A hash of one service's drift results at a point in time."""

    service: str
    hash: str
    diff_count: int
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "hash": self.hash,
            "diff_count": self.diff_count,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DigestEntry:
        return cls(
            service=data.get("service", ""),
            hash=data.get("hash", ""),
            diff_count=int(data.get("diff_count", 0)),
            created_at=parse_timestamp(data.get("created_at")),
        )


def compute_digest(result: CompareResult) -> str:
    """Produce a stable SHA-256 hex hash over the diffs of one service."""
    digest = hashlib.sha256()
    for d in sorted(result.diffs, key=lambda d: d.key):
        kind = d.kind.value if d.kind is not None else ""
        digest.update(f"{d.key}={{{d.key} {d.expected} {d.actual} {kind}}};".encode())
    return digest.hexdigest()


def save_digests(path: str | Path, entries: Iterable[DigestEntry]) -> None:
    """Write digest entries to path as JSON."""
    data = [e.to_dict() for e in entries]
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_digests(path: str | Path) -> list[DigestEntry]:
    """Read digest entries; a missing file gives an empty list."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    return [DigestEntry.from_dict(e) for e in json.loads(text) or []]


def build_digests(results: Iterable[CompareResult]) -> list[DigestEntry]:
    """Create a digest entry for each drifted result."""
    now = datetime.now(timezone.utc)
    return [
        DigestEntry(r.service, compute_digest(r), len(r.diffs), now)
        for r in results
        if r.diffs
    ]


def digests_changed(
    previous: Iterable[DigestEntry], current: Iterable[DigestEntry]
) -> list[str]:
    """Return the services whose digest differs from the previous set."""
    prev = {e.service: e.hash for e in previous}
    return [e.service for e in current if prev.get(e.service, "") != e.hash]