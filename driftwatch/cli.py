"""Command-line entry point for the driftwatch record-keeping commands."""

from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from typing import Callable, Sequence

from .annotation import add_annotation, filter_annotations, load_annotations
from .attribution import add_attribution, filter_attributions, load_attributions
from .audit import append_audit_event, filter_audit_log, format_audit_log, load_audit_log
from .baseline import diff_baseline, load_baseline, save_baseline
from .changelog import ChangelogEntry, append_changelog, filter_changelog, load_changelog
from .dependency import add_dependency, dependencies_of, dependents_of, load_dependencies

_USAGE = "usage: driftwatch <command> <subcommand> [args...]"
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class _CommandError(Exception):
    """A command failed; the message is shown to the user."""


def _env_or(key: str, fallback: str) -> str:
    return os.environ.get(key) or fallback


def _require(args: Sequence[str], count: int, usage: str) -> None:
    if len(args) < count:
        raise _CommandError(usage)


def _utc(moment: datetime | None) -> datetime:
    if moment is None:
        return _ZERO_TIME
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _date(moment: datetime | None) -> str:
    m = _utc(moment)
    return f"{m.year:04d}-{m.month:02d}-{m.day:02d}"


def _clock(moment: datetime | None) -> str:
    m = _utc(moment)
    return f"{m.hour:02d}:{m.minute:02d}:{m.second:02d}"


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _annotation_add(args: Sequence[str]) -> None:
    _require(args, 3, "usage: annotation add <service> <key> <note> [author]")
    service, key, note = args[0], args[1], args[2]
    author = args[3] if len(args) >= 4 else _env_or("DRIFTWATCH_AUTHOR", "unknown")
    path = _env_or("DRIFTWATCH_ANNOTATIONS", "annotations.json")
    try:
        add_annotation(path, service, key, note, author)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"add annotation: {exc}") from exc
    print(f"annotation added for {service}/{key}")


def _annotation_show(args: Sequence[str]) -> None:
    path = _env_or("DRIFTWATCH_ANNOTATIONS", "annotations.json")
    try:
        annotations = load_annotations(path)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load annotations: {exc}") from exc
    service = args[0] if len(args) >= 1 else ""
    key = args[1] if len(args) >= 2 else ""
    filtered = filter_annotations(annotations, service, key)
    if not filtered:
        print("no annotations found")
        return
    for a in filtered:
        print(
            f"[{_date(a.created_at)}] {a.service}/{a.key} — {a.note} "
            f"(by {a.author} at {_clock(a.created_at)})"
        )


def _attribution_add(args: Sequence[str]) -> None:
    _require(args, 4, "usage: attribution add <file> <service> <key> <owner> [team] [reason]")
    path, service, key, owner = args[0], args[1], args[2], args[3]
    team = args[4] if len(args) >= 5 else ""
    reason = args[5] if len(args) >= 6 else ""
    try:
        add_attribution(path, service, key, owner, team, reason)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"add attribution: {exc}") from exc
    print(f"attribution recorded: service={service} key={key} owner={owner}")


def _attribution_show(args: Sequence[str]) -> None:
    _require(args, 1, "usage: attribution show <file> [service]")
    path = args[0]
    service = args[1] if len(args) >= 2 else ""
    try:
        store = load_attributions(path)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load attributions: {exc}") from exc
    entries = filter_attributions(store, service)
    if not entries:
        print("no attribution records found")
        return
    for e in entries:
        print(
            f"[{_date(e.timestamp)}T{_clock(e.timestamp)}Z] service={e.service} key={e.key} "
            f"owner={e.owner} team={e.team or '(none)'} reason={e.reason or '(none)'}"
        )


def _audit_append(args: Sequence[str]) -> None:
    _require(args, 4, "usage: audit append <path> <action> <service> <user> [detail]")
    path, action, service, user = args[0], args[1], args[2], args[3]
    detail = args[4] if len(args) >= 5 else ""
    try:
        append_audit_event(path, action, service, user, detail)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"audit append: {exc}") from exc
    print(f"audit event recorded: action={action} service={service} user={user}")


def _audit_show(args: Sequence[str]) -> None:
    _require(args, 1, "usage: audit show <path> [service] [action]")
    path = args[0]
    service = args[1] if len(args) >= 2 else ""
    action = args[2] if len(args) >= 3 else ""
    try:
        events = load_audit_log(path)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load audit log: {exc}") from exc
    filtered = filter_audit_log(events, service, action)
    if not filtered:
        print("no audit events found")
        return
    print(format_audit_log(filtered), end="")


def _baseline_save(args: Sequence[str]) -> None:
    _require(args, 2, "usage: baseline save <results-file> <baseline-file>")
    results_path, baseline_path = args[0], args[1]
    try:
        loaded = load_baseline(results_path)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load results: {exc}") from exc
    try:
        save_baseline(baseline_path, loaded.results)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"save baseline: {exc}") from exc
    print(f"Baseline saved to {baseline_path} ({len(loaded.results)} services)")


def _baseline_diff(args: Sequence[str]) -> None:
    _require(args, 2, "usage: baseline diff <baseline-file> <current-file>")
    try:
        baseline = load_baseline(args[0])
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load baseline: {exc}") from exc
    try:
        current = load_baseline(args[1])
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load current: {exc}") from exc
    changed = diff_baseline(baseline, current.results)
    if not changed:
        print("No drift changes since baseline.")
        return
    print(f"{len(changed)} service(s) changed since baseline:")
    for r in changed:
        status = f"{len(r.diffs)} diff(s)" if r.has_drift() else "clean"
        print(f"  {r.service}: {status}")


def _changelog_show(args: Sequence[str]) -> None:
    _require(args, 1, "usage: changelog show <path> [service]")
    service = args[1] if len(args) >= 2 else ""
    try:
        entries = load_changelog(args[0])
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load changelog: {exc}") from exc
    filtered = filter_changelog(entries, service)
    if not filtered:
        print("no changelog entries found")
        return
    for e in filtered:
        print(f"[{_date(e.timestamp)} {_clock(e.timestamp)}] {e.service} — {len(e.diffs)} diff(s)")
        for d in e.diffs:
            print(f"  key={d.key} expected={d.expected} actual={d.actual}")
        if e.note:
            print(f"  note: {e.note}")


def _changelog_append(args: Sequence[str]) -> None:
    _require(args, 3, "usage: changelog append <path> <service> <note>")
    try:
        append_changelog(args[0], ChangelogEntry(service=args[1], note=args[2]))
    except (OSError, ValueError) as exc:
        raise _CommandError(f"append changelog: {exc}") from exc
    print(f"changelog entry added for service {_quote(args[1])}")


def _dependency_add(args: Sequence[str]) -> None:
    _require(args, 2, "usage: dependency add <from> <to> [label]")
    from_service, to_service = args[0], args[1]
    label = args[2] if len(args) >= 3 else ""
    path = _env_or("DRIFTWATCH_DEP_FILE", "deps.json")
    try:
        add_dependency(path, from_service, to_service, label)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"add dependency: {exc}") from exc
    print(f"dependency added: {from_service} -> {to_service}")


def _dependency_show(args: Sequence[str]) -> None:
    _require(args, 1, "usage: dependency show <service>")
    service = args[0]
    direction = args[1].lower() if len(args) >= 2 else "dependencies"
    path = _env_or("DRIFTWATCH_DEP_FILE", "deps.json")
    try:
        graph = load_dependencies(path)
    except (OSError, ValueError) as exc:
        raise _CommandError(f"load dependencies: {exc}") from exc
    if direction == "dependents":
        found = dependents_of(graph, service)
    else:
        found = dependencies_of(graph, service)
    if not found:
        print(f"no {direction} found for {service}")
        return
    print(f"{direction} of {service}:")
    for name in found:
        print(f"  - {name}")


_COMMANDS: dict[tuple[str, str], Callable[[Sequence[str]], None]] = {
    ("annotation", "add"): _annotation_add,
    ("annotation", "show"): _annotation_show,
    ("attribution", "add"): _attribution_add,
    ("attribution", "show"): _attribution_show,
    ("audit", "append"): _audit_append,
    ("audit", "show"): _audit_show,
    ("baseline", "save"): _baseline_save,
    ("baseline", "diff"): _baseline_diff,
    ("changelog", "show"): _changelog_show,
    ("changelog", "append"): _changelog_append,
    ("dependency", "add"): _dependency_add,
    ("dependency", "show"): _dependency_show,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command and return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        if len(args) < 2:
            raise _CommandError(_USAGE)
        handler = _COMMANDS.get((args[0], args[1]))
        if handler is None:
            raise _CommandError(f"unknown command: {args[0]} {args[1]}")
        handler(args[2:])
    except _CommandError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())