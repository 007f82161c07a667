"""Path-key codec: nested trees <-> ordered (path, value) records.

Keys are segments joined by a separator (``#`` by default). A segment
addressing an array element carries index suffixes::

    {"user": {"tags": ["a", "b"]}}  ->  user#tags[0] = "a", user#tags[1] = "b"
    {"grid": [[1, 2]]}              ->  grid[0][0] = 1, grid[0][1] = 2

Arrays under ``...geometry#coordinates`` are not expanded: only their first
element (the outer ring of a polygon) is stored, as one entry. That makes
``unflatten(flatten(tree))`` lossy for GeoJSON geometries.
"""
from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

from file_transcoder.constants import COORDINATES_KEY, GEOMETRY_PARENT, PATH_SEPARATOR
from file_transcoder.errors import InvalidKeyError
from file_transcoder.records import FieldEntry, Record

_SEGMENT_RE = re.compile(r"^(?P<name>[^\[\]]*?)(?P<indices>(?:\[\d+\])+)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")

Segment = Tuple[str, Tuple[int, ...]]


def parse_segment(segment: str) -> Segment:
    """Split ``"name[1][2]"`` into ``("name", (1, 2))``; plain names get ``()``."""
    m = _SEGMENT_RE.match(segment)
    if not m:
        return segment, ()
    indices = tuple(int(i) for i in _INDEX_RE.findall(m.group("indices")))
    return m.group("name"), indices


def split_key(key: str, sep: str = PATH_SEPARATOR) -> List[Segment]:
    return [parse_segment(part) for part in key.split(sep)]


def join_key(parent: str, name: str, sep: str = PATH_SEPARATOR) -> str:
    return f"{parent}{sep}{name}" if parent else name


# ---------------------------------------------------------------------------
# flatten
# ---------------------------------------------------------------------------


def flatten(tree: Mapping[str, Any], sep: str = PATH_SEPARATOR) -> Record:
    """Flatten one object tree into a :class:`Record` in traversal order."""
    if not isinstance(tree, Mapping):
        raise TypeError(
            f"Expected an object to flatten, got {type(tree).__name__}"
        )
    out: List[FieldEntry] = []
    _flatten_object(tree, "", out, sep)
    return Record(out)


def _flatten_object(obj: Mapping[str, Any], parent: str, out: List[FieldEntry], sep: str) -> None:
    for key, value in obj.items():
        path = join_key(parent, str(key), sep)
        if isinstance(value, list) and _is_geometry_coordinates(str(key), parent):
            out.append(FieldEntry(path, value[0] if value else value))
        else:
            _flatten_value(value, path, out, sep)


def _flatten_value(value: Any, path: str, out: List[FieldEntry], sep: str) -> None:
    if isinstance(value, Mapping):
        if value:
            _flatten_object(value, path, out, sep)
        else:
            out.append(FieldEntry(path, {}))
    elif isinstance(value, list):
        if value:
            for i, item in enumerate(value):
                _flatten_value(item, f"{path}[{i}]", out, sep)
        else:
            out.append(FieldEntry(path, []))
    else:
        out.append(FieldEntry(path, value))


def _is_geometry_coordinates(key: str, parent: str) -> bool:
    return key == COORDINATES_KEY and parent.endswith(GEOMETRY_PARENT)


# ---------------------------------------------------------------------------
# unflatten
# ---------------------------------------------------------------------------


def unflatten(dataset: Iterable[Record], sep: str = PATH_SEPARATOR) -> List[dict]:
    """Rebuild one object tree per record.

    Indexed segments force a list grown to fit the index; a gap in the
    indices leaves ``None`` placeholders. Later entries for the same path
    overwrite earlier ones.
    """
    return [unflatten_record(record, sep) for record in dataset]


def unflatten_record(record: Iterable[FieldEntry], sep: str = PATH_SEPARATOR) -> dict:
    root: dict = {}
    for entry in record:
        key = entry.key
        if not isinstance(key, str) or not key.strip():
            raise InvalidKeyError(f"Key must be a non-empty string, got {key!r}")
        _assign(root, split_key(key, sep), entry.value, key)
    return root


def _assign(root: dict, segments: Sequence[Segment], value: Any, key: str) -> None:
    # Each step is a (container, slot) pair: a dict + name or a list + index.
    steps: List[Tuple[Any, Any]] = []
    for name, indices in segments:
        steps.append(("name", name))
        for idx in indices:
            steps.append(("index", idx))

    current: Any = root
    for pos, (kind, slot) in enumerate(steps):
        last = pos == len(steps) - 1
        if kind == "name":
            if not isinstance(current, dict):
                raise InvalidKeyError(f"Conflicting path in key {key!r} at {slot!r}")
            if last:
                current[slot] = value
                return
            current = _child(current, slot, steps[pos + 1][0], key)
        else:
            if not isinstance(current, list):
                raise InvalidKeyError(f"Conflicting path in key {key!r} at [{slot}]")
            if len(current) <= slot:
                current.extend([None] * (slot + 1 - len(current)))
            if last:
                current[slot] = value
                return
            current = _child(current, slot, steps[pos + 1][0], key)


def _child(container: Any, slot: Any, next_kind: str, key: str) -> Any:
    """Return ``container[slot]``, creating a dict or list as the next step needs."""
    want = list if next_kind == "index" else dict
    existing = container[slot] if isinstance(container, list) else container.get(slot)
    if existing is None:
        existing = want()
        container[slot] = existing
    elif not isinstance(existing, want):
        raise InvalidKeyError(f"Conflicting path in key {key!r}: expected {want.__name__}")
    return existing
