"""An append-only log of actions taken on services."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .models import format_timestamp, parse_timestamp


def _rfc3339(moment: datetime | None) -> str:
    if moment is None:
        return "0001-01-01T00:00:00Z"
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class AuditEvent:
    """One recorded action."""

    action: str = ""
    service: str = ""
    user: str = ""
    detail: str = ""
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": format_timestamp(self.timestamp),
            "action": self.action,
            "service": self.service,
            "user": self.user,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditEvent:
        return cls(
            action=data.get("action", ""),
            service=data.get("service", ""),
            user=data.get("user", ""),
            detail=data.get("detail", ""),
            timestamp=parse_timestamp(data.get("timestamp")),
        )


def load_audit_log(path: str | Path) -> list[AuditEvent]:
    """Read the audit log; a missing file gives an empty list."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    return [AuditEvent.from_dict(e) for e in json.loads(text) or []]


def append_audit_event(
    path: str | Path, action: str, service: str, user: str, detail: str
) -> None:
    """Record a new audit event in the log at path."""
    try:
        events = load_audit_log(path)
    except (OSError, ValueError):
        events = []
    events.append(
        AuditEvent(
            action=action,
            service=service,
            user=user,
            detail=detail,
            timestamp=datetime.now(timezone.utc),
        )
    )
    data = [e.to_dict() for e in events]
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def filter_audit_log(
    events: Iterable[AuditEvent], service: str, action: str
) -> list[AuditEvent]:
    """Return events matching service and action; empty values match all."""
    return [
        e
        for e in events
        if (not service or e.service == service) and (not action or e.action == action)
    ]


def format_audit_log(events: Iterable[AuditEvent] | None) -> str:
    """Render events one per line."""
    lines = [
        f"[{_rfc3339(e.timestamp)}] {e.action} | service={e.service} "
        f"user={e.user} detail={e.detail}\n"
        for e in events or []
    ]
    if not lines:
        return "no audit events found\n"
    return "".join(lines)