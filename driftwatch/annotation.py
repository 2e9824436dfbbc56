"""Free-form notes attached to a service's config keys."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .models import format_timestamp, parse_timestamp


@dataclass
class Annotation:
    """A note about one config key of one service."""

    service: str
    key: str
    note: str
    author: str = ""
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "key": self.key,
            "note": self.note,
            "author": self.author,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Annotation:
        return cls(
            service=data.get("service", ""),
            key=data.get("key", ""),
            note=data.get("note", ""),
            author=data.get("author", ""),
            created_at=parse_timestamp(data.get("created_at")),
        )


def load_annotations(path: str | Path) -> list[Annotation]:
    """Read all annotations; a missing file gives an empty list."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    data = json.loads(text) or {}
    return [Annotation.from_dict(a) for a in data.get("annotations") or []]


def _save_annotations(path: str | Path, annotations: list[Annotation]) -> None:
    data = {"annotations": [a.to_dict() for a in annotations]}
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def add_annotation(path: str | Path, service: str, key: str, note: str, author: str) -> None:
    """Append an annotation to the store at path."""
    if not service or not key or not note:
        raise ValueError("service, key, and note are required")
    try:
        annotations = load_annotations(path)
    except (OSError, ValueError):
        annotations = []
    annotations.append(
        Annotation(
            service=service,
            key=key,
            note=note,
            author=author,
            created_at=datetime.now(timezone.utc),
        )
    )
    _save_annotations(path, annotations)


def filter_annotations(
    annotations: Iterable[Annotation], service: str, key: str
) -> list[Annotation]:
    """Return annotations matching service and key; empty values match all."""
    return [
        a
        for a in annotations
        if (not service or a.service == service) and (not key or a.key == key)
    ]