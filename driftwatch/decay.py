"""Exponential decay of drift scores by how long ago drift was last seen."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from .models import CompareResult, HistoryEntry, format_timestamp, parse_timestamp

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass
class DecayEntry:
    """The decayed drift score of one service."""

    service: str
    score: float
    last_seen: datetime | None
    age_days: float
    decayed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "score": self.score,
            "last_seen": format_timestamp(self.last_seen),
            "age_days": self.age_days,
            "decayed": self.decayed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DecayEntry:
        return cls(
            service=data.get("service", ""),
            score=float(data.get("score", 0.0)),
            last_seen=parse_timestamp(data.get("last_seen")),
            age_days=float(data.get("age_days", 0.0)),
            decayed=bool(data.get("decayed", False)),
        )


@dataclass
class DecayOptions:
    """Controls decay behaviour.

    half_life_days is the number of days after which a score is halved;
    threshold_score is the lowest decayed score still considered active.
    """

    half_life_days: float = 7.0
    threshold_score: float = 0.1


def default_decay_options() -> DecayOptions:
    """Return the default options: a seven-day half-life and a 0.1 threshold."""
    return DecayOptions(half_life_days=7.0, threshold_score=0.1)


def _round(value: float, places: int) -> float:
    scale = 10**places
    return math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale


def _utc(moment: datetime | None) -> datetime:
    if moment is None:
        return _ZERO_TIME
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def apply_decay(
    results: Iterable[CompareResult],
    history: Iterable[HistoryEntry] | None,
    opts: DecayOptions | None = None,
) -> list[DecayEntry]:
    """Score drifted services, decayed by the age of their latest history entry.

    Services with no history are scored at full weight, as if seen now.
    The entries come back highest score first.
    """
    opts = opts or default_decay_options()
    half_life = opts.half_life_days
    if half_life <= 0:
        half_life = default_decay_options().half_life_days

    latest: dict[str, datetime] = {}
    for h in history or []:
        moment = _utc(h.timestamp)
        if h.service not in latest or moment > latest[h.service]:
            latest[h.service] = moment

    now = datetime.now(timezone.utc)
    k = math.log(2) / half_life

    entries = []
    for r in results:
        if not r.diffs:
            continue
        raw_score = float(len(r.diffs))
        ref = latest.get(r.service, now)
        age_days = (now - ref).total_seconds() / 86400.0
        decayed = raw_score * math.exp(-k * age_days)
        entries.append(
            DecayEntry(
                service=r.service,
                score=_round(decayed, 3),
                last_seen=ref,
                age_days=_round(age_days, 1),
                decayed=decayed < opts.threshold_score,
            )
        )

    entries.sort(key=lambda e: e.score, reverse=True)
    return entries


def format_decay(entries: Iterable[DecayEntry] | None) -> str:
    """Return a human-readable table of decay entries."""
    rows = [
        f"{e.service:<24} {e.score:>10.3f} {e.age_days:>10.1f} "
        f"{'yes' if e.decayed else 'no':>8}\n"
        for e in entries or []
    ]
    if not rows:
        return "no active drift decay entries\n"
    header = f"{'SERVICE':<24} {'SCORE':>10} {'AGE(days)':>10} {'DECAYED':>8}\n"
    rule = f"{'-------':<24} {'-----':>10} {'---------':>10} {'-------':>8}\n"
    return header + rule + "".join(rows)