"""Restrict drift results to services seen within a time window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from .models import CompareResult, HistoryEntry

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class WindowOptions:
    """An inclusive time range."""

    start: datetime
    end: datetime


def apply_window(
    results: Iterable[CompareResult],
    history: Iterable[HistoryEntry] | None,
    opts: WindowOptions,
) -> list[CompareResult]:
    """Keep results whose service was recorded in history within the window."""
    in_window = {
        h.service
        for h in history or []
        if opts.start <= (h.recorded_at or _ZERO_TIME) <= opts.end
    }
    return [r for r in results if r.service in in_window]


def format_window(opts: WindowOptions) -> str:
    """Return a human-readable description of the window."""
    return f"from {_rfc3339(opts.start)} to {_rfc3339(opts.end)}"


def new_window_options(duration: timedelta) -> WindowOptions:
    """Build a window reaching back the given duration from now."""
    now = datetime.now(timezone.utc)
    return WindowOptions(start=now - duration, end=now)