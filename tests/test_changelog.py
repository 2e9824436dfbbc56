import json
from datetime import datetime, timezone

import pytest

from driftwatch.changelog import (
    ChangelogEntry,
    append_changelog,
    filter_changelog,
    load_changelog,
)
from driftwatch.models import Diff


def make_entry(service, key):
    return ChangelogEntry(
        service=service,
        diffs=[Diff(key=key, expected="a", actual="b")],
        timestamp=datetime.now(timezone.utc),
    )


@pytest.fixture
def path(tmp_path):
    return tmp_path / "changelog.json"


def test_append_and_load_changelog(path):
    append_changelog(path, make_entry("svc-a", "port"))
    append_changelog(path, make_entry("svc-b", "timeout"))
    cl = load_changelog(path)
    assert [e.service for e in cl] == ["svc-a", "svc-b"]
    assert cl[1].diffs[0].key == "timeout"
    assert cl[1].diffs[0].expected == "a"
    assert cl[1].diffs[0].actual == "b"


def test_load_changelog_not_found(tmp_path):
    assert load_changelog(tmp_path / "nonexistent" / "changelog.json") == []


def test_filter_changelog_by_service(path):
    append_changelog(path, make_entry("alpha", "k1"))
    append_changelog(path, make_entry("beta", "k2"))
    append_changelog(path, make_entry("alpha", "k3"))
    filtered = filter_changelog(load_changelog(path), "alpha")
    assert [e.diffs[0].key for e in filtered] == ["k1", "k3"]


def test_filter_changelog_empty_service(path):
    append_changelog(path, make_entry("x", "k"))
    append_changelog(path, make_entry("y", "k"))
    assert len(filter_changelog(load_changelog(path), "")) == 2


def test_append_changelog_sets_timestamp(path):
    before = datetime.now(timezone.utc)
    append_changelog(path, ChangelogEntry(service="svc"))
    cl = load_changelog(path)
    assert cl[0].timestamp is not None
    assert cl[0].timestamp >= before.replace(microsecond=0)


def test_append_changelog_keeps_given_timestamp(path):
    stamp = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    append_changelog(path, ChangelogEntry(service="svc", timestamp=stamp))
    assert load_changelog(path)[0].timestamp == stamp


def test_note_round_trip_and_omitted_when_empty(path):
    append_changelog(path, ChangelogEntry(service="a", note="manual fix"))
    append_changelog(path, ChangelogEntry(service="b"))
    raw = json.loads(path.read_text())
    assert raw[0]["note"] == "manual fix"
    assert "note" not in raw[1]
    assert load_changelog(path)[0].note == "manual fix"


def test_append_changelog_corrupt_file_raises(path):
    path.write_text("not json")
    with pytest.raises(ValueError):
        append_changelog(path, ChangelogEntry(service="svc"))