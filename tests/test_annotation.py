from datetime import datetime, timezone

import pytest

from driftwatch.annotation import (
    Annotation,
    add_annotation,
    filter_annotations,
    load_annotations,
)


@pytest.fixture
def path(tmp_path):
    return tmp_path / "annotations.json"


def test_add_and_load_annotation(path):
    add_annotation(path, "svc-a", "replicas", "intentional change", "alice")
    anns = load_annotations(path)
    assert len(anns) == 1
    assert anns[0].service == "svc-a"
    assert anns[0].key == "replicas"
    assert anns[0].note == "intentional change"
    assert anns[0].author == "alice"
    assert anns[0].created_at is not None


@pytest.mark.parametrize(
    "service,key,note",
    [("", "key", "note"), ("svc", "", "note"), ("svc", "key", "")],
)
def test_add_annotation_missing_fields(path, service, key, note):
    with pytest.raises(ValueError):
        add_annotation(path, service, key, note, "author")
    assert not path.exists()


def test_load_annotations_not_found(tmp_path):
    assert load_annotations(tmp_path / "missing.json") == []


def test_filter_annotations(path):
    add_annotation(path, "svc-a", "replicas", "note1", "alice")
    add_annotation(path, "svc-b", "image", "note2", "bob")
    add_annotation(path, "svc-a", "image", "note3", "carol")
    anns = load_annotations(path)

    assert len(filter_annotations(anns, "svc-a", "")) == 2
    only = filter_annotations(anns, "svc-a", "image")
    assert [a.note for a in only] == ["note3"]
    assert len(filter_annotations(anns, "", "")) == 3
    assert [a.note for a in filter_annotations(anns, "", "image")] == ["note2", "note3"]


def test_add_annotation_multiple_entries(path):
    for _ in range(3):
        add_annotation(path, "svc", "key", "note", "author")
    assert len(load_annotations(path)) == 3


def test_load_annotations_from_file(path):
    path.write_text(
        '{"annotations":[{"service":"svc-a","key":"replicas","note":"ok",'
        '"author":"alice","created_at":"2024-01-01T00:00:00Z"}]}'
    )
    anns = load_annotations(path)
    assert anns == [
        Annotation(
            service="svc-a",
            key="replicas",
            note="ok",
            author="alice",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
    ]


def test_load_annotations_invalid_json(path):
    path.write_text("{not json")
    with pytest.raises(ValueError):
        load_annotations(path)


def test_add_annotation_over_corrupt_file(path):
    path.write_text("{not json")
    add_annotation(path, "svc", "key", "note", "author")
    assert [a.service for a in load_annotations(path)] == ["svc"]