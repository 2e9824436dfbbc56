"""Core drift result types shared across the package."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_ZERO_TIME_TEXT = "0001-01-01T00:00:00Z"
_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


def parse_timestamp(text: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp; the zero time and None give None."""
    if text is None:
        return None
    match = _TIMESTAMP_RE.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    base, fraction, zone = match.groups()
    micros = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if zone == "Z" else zone
    parsed = datetime.fromisoformat(f"{base}.{micros}{offset}")
    if parsed == _ZERO_TIME:
        return None
    return parsed


def format_timestamp(moment: datetime | None) -> str:
    """Render a timestamp as RFC 3339 in UTC; None renders as the zero time."""
    if moment is None:
        return _ZERO_TIME_TEXT
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    text = moment.replace(tzinfo=None).isoformat(timespec="seconds")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    return text + "Z"


class DiffKind(str, Enum):
    """The type of a drift difference."""

    CHANGED = "changed"
    MISSING = "missing"
    UNEXPECTED = "unexpected"


@dataclass
class Diff:
    """A single field-level difference between manifest and live config."""

    key: str
    expected: str = ""
    actual: str = ""
    kind: DiffKind | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "expected": self.expected,
            "actual": self.actual,
            "kind": self.kind.value if self.kind is not None else "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Diff:
        kind = data.get("kind") or ""
        return cls(
            key=data.get("key", ""),
            expected=data.get("expected", ""),
            actual=data.get("actual", ""),
            kind=DiffKind(kind) if kind else None,
        )


@dataclass
class CompareResult:
    """The drift results for a single service."""

    service: str
    diffs: list[Diff] = field(default_factory=list)

    def has_drift(self) -> bool:
        """Return True when the result contains at least one diff."""
        return len(self.diffs) > 0

    def to_dict(self) -> dict[str, Any]:
        return {"service": self.service, "diffs": [d.to_dict() for d in self.diffs]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompareResult:
        return cls(
            service=data.get("service", ""),
            diffs=[Diff.from_dict(d) for d in data.get("diffs") or []],
        )


@dataclass
class HistoryEntry:
    """A recorded drift check for one service or a whole run."""

    service: str = ""
    recorded_at: datetime | None = None
    timestamp: datetime | None = None
    results: list[CompareResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "recorded_at": format_timestamp(self.recorded_at),
            "timestamp": format_timestamp(self.timestamp),
            "results": [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        return cls(
            service=data.get("service", ""),
            recorded_at=parse_timestamp(data.get("recorded_at")),
            timestamp=parse_timestamp(data.get("timestamp")),
            results=[CompareResult.from_dict(r) for r in data.get("results") or []],
        )