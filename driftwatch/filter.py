"""Options controlling which drift results are included in output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .models import CompareResult, Diff


@dataclass
class FilterOptions:
    """Filters services by drift state and prefix, and drops ignored keys."""

    only_drifted: bool = False
    service_prefix: str = ""
    ignore_keys: set[str] = field(default_factory=set)

    def add_ignore_key(self, key: str) -> None:
        """Register a key to be excluded from drift results."""
        self.ignore_keys.add(key)

    def should_ignore_key(self, key: str) -> bool:
        """Report whether the given key should be skipped."""
        return key in self.ignore_keys

    def apply_to_results(self, results: Iterable[CompareResult]) -> list[CompareResult]:
        """Return the results that pass the filter, with ignored keys removed."""
        out = []
        for result in results:
            if self.service_prefix and not result.service.startswith(self.service_prefix):
                continue
            diffs: list[Diff] = [d for d in result.diffs if d.key not in self.ignore_keys]
            if self.only_drifted and not diffs:
                continue
            out.append(CompareResult(service=result.service, diffs=diffs))
        return out