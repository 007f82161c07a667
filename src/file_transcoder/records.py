"""Intermediate representation shared by every format adapter.

A :class:`Record` is the flattened form of one entity (one JSON object, one
repeated XML element, one CSV row): an ordered list of
:class:`FieldEntry` ``(key, value)`` pairs. A dataset is simply a list of
records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class FieldEntry:
    key: str
    value: Any


@dataclass
class Record:
    entries: List[FieldEntry] = field(default_factory=list)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Any]]) -> "Record":
        return cls([FieldEntry(k, v) for k, v in pairs])

    def __iter__(self) -> Iterator[FieldEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> List[str]:
        return [e.key for e in self.entries]

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value of the last entry stored under ``key``."""
        for entry in reversed(self.entries):
            if entry.key == key:
                return entry.value
        return default

    def as_dict(self) -> dict:
        """Key -> value mapping (later duplicates win)."""
        return {e.key: e.value for e in self.entries}

    def map_values(
        self, fn: Callable[[str, Any], Any], keys: Optional[Callable[[str], bool]] = None
    ) -> "Record":
        """Return a new record with ``fn(key, value)`` applied.

        When ``keys`` is given only entries whose key satisfies it are
        rewritten; the others are copied unchanged.
        """
        out = []
        for e in self.entries:
            if keys is None or keys(e.key):
                out.append(FieldEntry(e.key, fn(e.key, e.value)))
            else:
                out.append(e)
        return Record(out)


Dataset = List[Record]

