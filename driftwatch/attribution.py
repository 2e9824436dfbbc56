"""Records of who is responsible for a drift event."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import format_timestamp, parse_timestamp


@dataclass
class Attribution:
    """Who is responsible for drift on one key of one service."""

    service: str
    key: str
    owner: str
    team: str = ""
    reason: str = ""
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "key": self.key,
            "owner": self.owner,
            "team": self.team,
            "reason": self.reason,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attribution:
        return cls(
            service=data.get("service", ""),
            key=data.get("key", ""),
            owner=data.get("owner", ""),
            team=data.get("team", ""),
            reason=data.get("reason", ""),
            timestamp=parse_timestamp(data.get("timestamp")),
        )


@dataclass
class AttributionStore:
    """All attribution records."""

    entries: list[Attribution] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"entries": [e.to_dict() for e in self.entries]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttributionStore:
        return cls(entries=[Attribution.from_dict(e) for e in data.get("entries") or []])


def load_attributions(path: str | Path) -> AttributionStore:
    """Read the attribution store; a missing file gives an empty store."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return AttributionStore()
    return AttributionStore.from_dict(json.loads(text) or {})


def add_attribution(
    path: str | Path, service: str, key: str, owner: str, team: str, reason: str
) -> None:
    """Append an attribution record to the store at path."""
    if not service or not key or not owner:
        raise ValueError("service, key, and owner are required")
    try:
        store = load_attributions(path)
    except (OSError, ValueError):
        store = AttributionStore()
    store.entries.append(
        Attribution(
            service=service,
            key=key,
            owner=owner,
            team=team,
            reason=reason,
            timestamp=datetime.now(timezone.utc),
        )
    )
    Path(path).write_text(json.dumps(store.to_dict(), indent=2), encoding="utf-8")


def filter_attributions(store: AttributionStore, service: str) -> list[Attribution]:
    """Return entries for service; an empty service returns all."""
    if not service:
        return list(store.entries)
    return [e for e in store.entries if e.service == service]