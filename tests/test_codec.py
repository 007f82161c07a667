"""Path-key flatten/unflatten."""

import pytest

from file_transcoder.codec import flatten, parse_segment, split_key, unflatten
from file_transcoder.errors import InvalidKeyError
from file_transcoder.records import FieldEntry, Record


def test_flatten_keys_follow_traversal_order():
    tree = {
        "name": "John",
        "user": {"address": {"city": "Anytown"}},
        "items": ["apple", "banana"],
        "users": [{"id": 1, "name": "Alice"}],
    }
    record = flatten(tree)
    assert record.keys() == [
        "name",
        "user#address#city",
        "items[0]",
        "items[1]",
        "users[0]#id",
        "users[0]#name",
    ]
    assert record.get("users[0]#name") == "Alice"


def test_round_trip_nested_objects_and_arrays():
    tree = {
        "id": 7,
        "active": True,
        "note": None,
        "user": {"name": "Jane", "tags": ["a", "b"], "scores": [1.5, 2]},
        "orders": [{"sku": "X", "lines": [{"qty": 1}, {"qty": 2}]}, {"sku": "Y"}],
        "grid": [[1, 2], [3]],
    }
    assert unflatten([flatten(tree)]) == [tree]


def test_round_trip_keeps_empty_containers():
    tree = {"meta": {}, "tags": [], "nested": {"list": [{}]}}
    assert unflatten([flatten(tree)]) == [tree]


def test_nested_arrays_use_stacked_indices():
    record = flatten({"grid": [[1, 2], [3]]})
    assert record.keys() == ["grid[0][0]", "grid[0][1]", "grid[1][0]"]


def test_geometry_coordinates_collapse_to_first_ring():
    ring = [[0, 0], [1, 0], [1, 1], [0, 0]]
    tree = {"geometry": {"type": "Polygon", "coordinates": [ring, [[5, 5]]]}}
    record = flatten(tree)
    assert record.keys() == ["geometry#type", "geometry#coordinates"]
    assert record.get("geometry#coordinates") == ring
    # known asymmetry: only the outer ring comes back
    assert unflatten([record]) == [{"geometry": {"type": "Polygon", "coordinates": ring}}]


def test_coordinates_outside_geometry_are_expanded():
    record = flatten({"point": {"coordinates": [1, 2]}})
    assert record.keys() == ["point#coordinates[0]", "point#coordinates[1]"]


def test_feature_collection_geometry_collapses():
    tree = {"features": [{"geometry": {"coordinates": [[[0, 0], [1, 1]]]}}]}
    record = flatten(tree)
    assert record.as_dict() == {"features[0]#geometry#coordinates": [[0, 0], [1, 1]]}


def test_flatten_rejects_non_object_root():
    with pytest.raises(TypeError):
        flatten(["a", "b"])


def test_unflatten_one_tree_per_record():
    dataset = [
        Record.from_pairs([("id", 1), ("data#value", "first")]),
        Record.from_pairs([("id", 2), ("data#value", "second")]),
    ]
    assert unflatten(dataset) == [
        {"id": 1, "data": {"value": "first"}},
        {"id": 2, "data": {"value": "second"}},
    ]


def test_unflatten_fills_index_gaps_with_none():
    dataset = [Record.from_pairs([("items[0]", "a"), ("items[2]", "c")])]
    assert unflatten(dataset) == [{"items": ["a", None, "c"]}]


def test_unflatten_out_of_order_indices():
    dataset = [Record.from_pairs([("users[1]#id", 2), ("users[0]#id", 1)])]
    assert unflatten(dataset) == [{"users": [{"id": 1}, {"id": 2}]}]


@pytest.mark.parametrize("key", ["", "   ", None, 5])
def test_unflatten_rejects_invalid_keys(key):
    with pytest.raises(InvalidKeyError):
        unflatten([Record([FieldEntry(key, "x")])])


def test_unflatten_rejects_conflicting_paths():
    with pytest.raises(InvalidKeyError):
        unflatten([Record.from_pairs([("a", 1), ("a#b", 2)])])
    with pytest.raises(InvalidKeyError):
        unflatten([Record.from_pairs([("a#b", 1), ("a[0]", 2)])])


def test_custom_separator():
    record = flatten({"a": {"b": 1}}, sep=".")
    assert record.keys() == ["a.b"]
    assert unflatten([record], sep=".") == [{"a": {"b": 1}}]


def test_parse_segment():
    assert parse_segment("users") == ("users", ())
    assert parse_segment("users[3]") == ("users", (3,))
    assert parse_segment("grid[1][0]") == ("grid", (1, 0))
    assert parse_segment("Land Use") == ("Land Use", ())
    assert split_key("a[0]#b") == [("a", (0,)), ("b", ())]
