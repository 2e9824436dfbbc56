"""Compare deployed configuration against an expected manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class FieldDiff:
    """A single field that differs."""

    field: str
    expected: Any
    actual: Any


@dataclass
class DriftResult:
    """The comparison result between a deployed config and a manifest."""

    service_name: str
    diffs: list[FieldDiff] = field(default_factory=list)

    @property
    def has_drift(self) -> bool:
        return len(self.diffs) > 0


def _deep_equal(a: Any, b: Any) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, Mapping):
        return a.keys() == b.keys() and all(_deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_deep_equal(x, y) for x, y in zip(a, b))
    return a == b


class Detector:
    """Compares deployed state against source manifests."""

    def compare(
        self, name: str, expected: Mapping[str, Any], deployed: Mapping[str, Any]
    ) -> DriftResult:
        """Check deployed against expected and return a DriftResult."""
        result = DriftResult(service_name=name)
        for key, exp_val in expected.items():
            if key not in deployed:
                result.diffs.append(FieldDiff(key, exp_val, None))
                continue
            act_val = deployed[key]
            if not _deep_equal(exp_val, act_val):
                result.diffs.append(FieldDiff(key, exp_val, act_val))
        for key, act_val in deployed.items():
            if key not in expected:
                result.diffs.append(FieldDiff(f"{key} (unexpected)", None, act_val))
        return result