"""Field transforms applied to records while decoding and encoding.

A transform picks the fields it cares about by key and has three hooks:

- ``decode``: source-native value -> value stored in the record
- ``encode``: record value -> target-native value
- ``revert``: undo the decode step (used for detokenization)

plus a record-level ``prepare`` step run before ``encode`` so a transform
can reshape the record (geometry collapse) before values are rewritten.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from file_transcoder.codec import parse_segment, unflatten_record
from file_transcoder.constants import (
    CARD_FIELD,
    COORDINATES_KEY,
    GEOMETRY_FIELD,
    PATH_SEPARATOR,
    TOKEN_ALGORITHM,
)
from file_transcoder.formats import FileFormat
from file_transcoder.records import Dataset, FieldEntry, Record
from file_transcoder.transforms.geometry import convert_geometry
from file_transcoder.transforms.tokens import CardTokenizer


@dataclass(frozen=True)
class TransformContext:
    """Per-request parameters threaded through every transform call.

    ``source`` is the format the values are currently encoded in, not
    something inferred from the values themselves.
    """

    source: FileFormat
    target: Optional[FileFormat] = None
    secret_key: str = ""
    algorithm: str = TOKEN_ALGORITHM
    separator: str = PATH_SEPARATOR

    def tokenizer(self) -> CardTokenizer:
        return CardTokenizer(self.secret_key, self.algorithm)


class FieldTransform:
    name = "identity"

    def matches(self, key: str, ctx: TransformContext) -> bool:
        return False

    def prepare(self, record: Record, ctx: TransformContext) -> Record:
        return record

    def decode(self, key: str, value: Any, ctx: TransformContext) -> Any:
        return value

    def encode(self, key: str, value: Any, ctx: TransformContext) -> Any:
        return value

    def revert(self, key: str, value: Any, ctx: TransformContext) -> Any:
        return value


class CardTokenTransform(FieldTransform):
    """Tokenizes ``tarjeta`` on decode; ``revert`` verifies and detokenizes."""

    name = "card_token"

    def __init__(self, field_name: str = CARD_FIELD):
        self.field_name = field_name

    def matches(self, key: str, ctx: TransformContext) -> bool:
        return key == self.field_name

    def decode(self, key: str, value: Any, ctx: TransformContext) -> Any:
        if value is None or value == "":
            return value
        return ctx.tokenizer().tokenize(value)

    def revert(self, key: str, value: Any, ctx: TransformContext) -> Any:
        return ctx.tokenizer().detokenize(value)


def is_coordinates_key(key: str) -> bool:
    return COORDINATES_KEY in key.lower()


class GeometryTransform(FieldTransform):
    """Converts ``poligono`` values to the target format's geometry shape.

    When the target is XML or delimited text, a flattened GeoJSON (entries
    whose key contains ``coordinates``) is first collapsed into a single
    ``poligono`` entry.
    """

    name = "geometry"

    def __init__(self, field_name: str = GEOMETRY_FIELD):
        self.field_name = field_name

    def matches(self, key: str, ctx: TransformContext) -> bool:
        return key == self.field_name

    def prepare(self, record: Record, ctx: TransformContext) -> Record:
        if ctx.target is None or ctx.target == FileFormat.JSON:
            return record
        roots = _geometry_roots(record, ctx.separator)
        if not roots:
            return record

        out: List[FieldEntry] = []
        emitted = set()
        for entry in record:
            root = _root_name(entry.key, ctx.separator)
            if root not in roots:
                out.append(entry)
                continue
            if root in emitted:
                continue
            emitted.add(root)
            group = [e for e in record if _root_name(e.key, ctx.separator) == root]
            tree = unflatten_record(group, ctx.separator)
            out.append(FieldEntry(self.field_name, tree.get(root)))
        return Record(out)

    def encode(self, key: str, value: Any, ctx: TransformContext) -> Any:
        if ctx.target is None:
            return value
        return convert_geometry(value, ctx.source, ctx.target)


def _root_name(key: str, sep: str) -> str:
    return parse_segment(key.split(sep, 1)[0])[0]


def _geometry_roots(record: Record, sep: str) -> set:
    return {
        _root_name(e.key, sep)
        for e in record
        if isinstance(e.key, str) and is_coordinates_key(e.key)
    }


class TransformRegistry:
    def __init__(self, transforms: Optional[Iterable[FieldTransform]] = None):
        self._transforms: List[FieldTransform] = list(transforms or [])

    @classmethod
    def default(cls) -> "TransformRegistry":
        return cls([CardTokenTransform(), GeometryTransform()])

    def register(self, transform: FieldTransform) -> None:
        self._transforms.append(transform)

    @property
    def transforms(self) -> List[FieldTransform]:
        return list(self._transforms)

    def _apply(self, record: Record, ctx: TransformContext, hook: str) -> Record:
        for t in self._transforms:
            fn = getattr(t, hook)
            record = record.map_values(
                lambda k, v, fn=fn: fn(k, v, ctx),
                keys=lambda k, t=t: t.matches(k, ctx),
            )
        return record

    def decode_record(self, record: Record, ctx: TransformContext) -> Record:
        return self._apply(record, ctx, "decode")

    def encode_record(self, record: Record, ctx: TransformContext) -> Record:
        for t in self._transforms:
            record = t.prepare(record, ctx)
        return self._apply(record, ctx, "encode")

    def encode_dataset(self, dataset: Dataset, ctx: TransformContext) -> Dataset:
        return [self.encode_record(r, ctx) for r in dataset]

    def revert(self, dataset: Dataset, ctx: TransformContext) -> Dataset:
        return [self._apply(r, ctx, "revert") for r in dataset]
