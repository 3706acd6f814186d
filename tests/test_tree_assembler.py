"""Tests for forest assembly and validated insertion."""
import pytest

from errors import ValidationError
from tree import build_children_index, build_forest


def _labels(forest):
    return [(n["label"], _labels(n["children"])) for n in forest]


def _walk(forest, depth=0):
    for n in forest:
        yield n, depth
        yield from _walk(n["children"], depth + 1)


def test_empty_forest(assembler):
    assert assembler.list_forest() == []


def test_sample_forest(assembler):
    root = assembler.create_node("root")
    bear = assembler.create_node("bear", root.id)
    assembler.create_node("cat", bear.id)
    assembler.create_node("frog", root.id)

    assert _labels(assembler.list_forest()) == [
        ("root", [("bear", [("cat", [])]), ("frog", [])]),
    ]


def test_forest_omits_parent_and_timestamps(assembler, sample_forest):
    for node, _ in _walk(assembler.list_forest()):
        assert set(node) == {"id", "label", "children"}


def test_every_node_appears_once_at_its_depth(assembler, store):
    a = assembler.create_node("a")
    b = assembler.create_node("b")
    a1 = assembler.create_node("a1", a.id)
    a1x = assembler.create_node("a1x", a1.id)
    b1 = assembler.create_node("b1", b.id)
    a2 = assembler.create_node("a2", a.id)

    expected_depths = {a.id: 0, b.id: 0, a1.id: 1, a2.id: 1, b1.id: 1, a1x.id: 2}
    seen = [(n["id"], depth) for n, depth in _walk(assembler.list_forest())]
    assert sorted(seen) == sorted(expected_depths.items())
    assert len(seen) == len(store.find_all())


def test_siblings_keep_creation_order(assembler):
    root = assembler.create_node("root")
    for label in ["zebra", "ant", "moose"]:
        assembler.create_node(label, root.id)

    children = assembler.list_forest()[0]["children"]
    assert [c["label"] for c in children] == ["zebra", "ant", "moose"]


def test_create_returns_full_record(assembler):
    node = assembler.create_node("x", None)
    assert node.id == 1
    assert node.label == "x"
    assert node.parent_id is None
    assert node.created_at == node.updated_at
    assert node.created_at.tzinfo is not None


def test_ids_increase(assembler):
    ids = [assembler.create_node(f"n{i}").id for i in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_unknown_parent_not_persisted(assembler, store):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node("orphan", 12345)
    assert set(exc.value.messages) == {"parentId"}
    assert store.find_all() == []


@pytest.mark.parametrize("label", [None, "", "  \t "])
def test_missing_label_not_persisted(assembler, store, label):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node(label)
    assert exc.value.messages == {"label": ["The label field is required."]}
    assert store.find_all() == []


def test_errors_are_aggregated(assembler):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node("x" * 300, 7)
    assert set(exc.value.messages) == {"label", "parentId"}


def test_non_integer_parent(assembler):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node("x", "1")
    assert exc.value.messages == {"parentId": ["The parent id field must be an integer."]}


def test_bool_parent_is_not_an_id(assembler, sample_forest):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node("x", True)
    assert "parentId" in exc.value.messages


def test_non_string_label(assembler):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node(42)
    assert exc.value.messages == {"label": ["The label field must be a string."]}


def test_null_character_in_label(assembler, store):
    with pytest.raises(ValidationError) as exc:
        assembler.create_node("a\x00b")
    assert exc.value.messages == {"label": ["The label field must not contain null characters."]}
    assert store.find_all() == []


def test_validate_reports_without_writing(assembler, store):
    assert assembler.validate("ok", None) == {}
    assert assembler.validate("", 99) == {
        "label": ["The label field is required."],
        "parentId": ["The selected parent id is invalid."],
    }
    assert store.find_all() == []


def test_round_trip(assembler):
    root = assembler.create_node("root")
    child = assembler.create_node("child", root.id)

    forest = assembler.list_forest()
    assert forest == [
        {"id": root.id, "label": "root", "children": [
            {"id": child.id, "label": "child", "children": []},
        ]},
    ]


def test_build_children_index_groups_by_parent(store, sample_forest):
    index = build_children_index(store.find_all())
    assert [n.label for n in index[None]] == ["root"]
    assert [n.label for n in index[sample_forest["root"].id]] == ["bear", "frog"]
    assert sample_forest["cat"].id not in index


def test_build_forest_skips_nodes_not_under_a_root():
    from datetime import datetime, timezone
    from models import Node

    now = datetime.now(timezone.utc)
    nodes = [
        Node(id=1, label="root", parent_id=None, created_at=now, updated_at=now),
        Node(id=2, label="loop-a", parent_id=3, created_at=now, updated_at=now),
        Node(id=3, label="loop-b", parent_id=2, created_at=now, updated_at=now),
    ]
    assert build_forest(nodes) == [{"id": 1, "label": "root", "children": []}]
