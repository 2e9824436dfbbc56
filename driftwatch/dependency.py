"""A directed graph of dependencies between services."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .models import format_timestamp, parse_timestamp


@dataclass
class DependencyEdge:
    """A directional dependency from one service to another."""

    from_service: str
    to_service: str
    label: str = ""
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"from": self.from_service, "to": self.to_service}
        if self.label:
            data["label"] = self.label
        data["created_at"] = format_timestamp(self.created_at)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyEdge:
        return cls(
            from_service=data.get("from", ""),
            to_service=data.get("to", ""),
            label=data.get("label", ""),
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass
class DependencyGraph:
    """All edges in the dependency map."""

    edges: list[DependencyEdge] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"edges": [e.to_dict() for e in self.edges]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DependencyGraph:
        return cls(edges=[DependencyEdge.from_dict(e) for e in data.get("edges") or []])


def load_dependencies(path: str | Path) -> DependencyGraph:
    """Read the dependency graph; a missing file gives an empty graph."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return DependencyGraph()
    return DependencyGraph.from_dict(json.loads(text) or {})


def add_dependency(path: str | Path, from_service: str, to_service: str, label: str) -> None:
    """Add an edge to the graph file; an existing (from, to) pair raises ValueError."""
    graph = load_dependencies(path)
    if any(e.from_service == from_service and e.to_service == to_service for e in graph.edges):
        raise ValueError(f"dependency {from_service!r} -> {to_service!r} already exists")
    graph.edges.append(
        DependencyEdge(
            from_service=from_service,
            to_service=to_service,
            label=label,
            created_at=datetime.now(timezone.utc),
        )
    )
    Path(path).write_text(json.dumps(graph.to_dict(), indent=2), encoding="utf-8")


def dependents_of(graph: DependencyGraph, service: str) -> list[str]:
    """Return the services that depend on the given service."""
    return [e.from_service for e in graph.edges if e.to_service == service]


def dependencies_of(graph: DependencyGraph, service: str) -> list[str]:
    """Return the services the given service depends on."""
    return [e.to_service for e in graph.edges if e.from_service == service]