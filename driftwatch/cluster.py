"""Group services that share similar drift patterns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .models import CompareResult


@dataclass
class ClusterGroup:
    """A set of services that share drifted keys."""

    label: str
    services: list[str]
    shared_keys: list[str]


@dataclass
class ClusterResult:
    """All discovered clusters and the services left outside them."""

    clusters: list[ClusterGroup] = field(default_factory=list)
    unclustered: list[str] = field(default_factory=list)


def cluster_by_drift_pattern(results: Iterable[CompareResult], min_shared: int) -> ClusterResult:
    """Greedily group services sharing at least min_shared drifted keys."""
    service_keys = {r.service: {d.key for d in r.diffs} for r in results if r.diffs}
    services = sorted(service_keys)

    assigned: set[str] = set()
    groups: list[ClusterGroup] = []
    for i, service in enumerate(services):
        if service in assigned:
            continue
        group = [service]
        shared = set(service_keys[service])
        for other in services[i + 1:]:
            if other in assigned:
                continue
            intersect = shared & service_keys[other]
            if len(intersect) >= min_shared:
                group.append(other)
                shared = intersect
                assigned.add(other)
        if len(group) > 1:
            assigned.add(service)
            groups.append(
                ClusterGroup(
                    label=f"cluster-{len(groups) + 1}",
                    services=group,
                    shared_keys=sorted(shared),
                )
            )

    unclustered = [s for s in services if s not in assigned]
    return ClusterResult(clusters=groups, unclustered=unclustered)


def format_cluster(result: ClusterResult) -> str:
    """Return a human-readable summary of cluster results."""
    lines = [f"Clusters found: {len(result.clusters)}\n"]
    for g in result.clusters:
        lines.append(
            f"  [{g.label}] services: {', '.join(g.services)} | "
            f"shared keys: {', '.join(g.shared_keys)}\n"
        )
    if result.unclustered:
        lines.append(f"Unclustered: {', '.join(result.unclustered)}\n")
    return "".join(lines)