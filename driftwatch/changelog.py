"""An ordered record of drift events per service."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .models import Diff, format_timestamp, parse_timestamp


@dataclass
class ChangelogEntry:
    """A single drift event for a service."""

    service: str
    diffs: list[Diff] = field(default_factory=list)
    note: str = ""
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timestamp": format_timestamp(self.timestamp),
            "service": self.service,
            "diffs": [d.to_dict() for d in self.diffs],
        }
        if self.note:
            data["note"] = self.note
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChangelogEntry:
        return cls(
            service=data.get("service", ""),
            diffs=[Diff.from_dict(d) for d in data.get("diffs") or []],
            note=data.get("note", ""),
            timestamp=parse_timestamp(data.get("timestamp")),
        )


def load_changelog(path: str | Path) -> list[ChangelogEntry]:
    """Read all changelog entries; a missing file gives an empty list."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    return [ChangelogEntry.from_dict(e) for e in json.loads(text) or []]


def append_changelog(path: str | Path, entry: ChangelogEntry) -> None:
    """Add an entry to the changelog file, stamping it with now if unset."""
    entries = load_changelog(path)
    if entry.timestamp is None:
        entry = replace(entry, timestamp=datetime.now(timezone.utc))
    entries.append(entry)
    data = [e.to_dict() for e in entries]
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def filter_changelog(entries: Iterable[ChangelogEntry], service: str) -> list[ChangelogEntry]:
    """Return entries for service; an empty service returns all."""
    if not service:
        return list(entries)
    return [e for e in entries if e.service == service]