"""The closed set of serialization formats the pipeline understands."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import Union

from file_transcoder.errors import UnsupportedFormatError


class FileFormat(str, Enum):
    JSON = "json"
    XML = "xml"
    CSV = "csv"
    TXT = "txt"

    @property
    def is_structured(self) -> bool:
        """JSON and XML carry nested trees."""
        return self in (FileFormat.JSON, FileFormat.XML)

    @property
    def is_tabular(self) -> bool:
        """CSV and TXT are flat delimited rows."""
        return self in (FileFormat.CSV, FileFormat.TXT)

    @classmethod
    def parse(cls, name: Union[str, "FileFormat", None]) -> "FileFormat":
        """Resolve a format name (case-insensitive, leading dot allowed)."""
        if isinstance(name, FileFormat):
            return name
        normalized = (name or "").strip().lstrip(".").lower()
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported file type: {normalized or name!r}"
            ) from None

    @classmethod
    def from_path(cls, path: Union[str, PurePath]) -> "FileFormat":
        """Resolve the format from a file name's extension."""
        suffix = PurePath(str(path)).suffix
        if not suffix:
            raise UnsupportedFormatError(f"File has no extension: {path}")
        return cls.parse(suffix)


def same_family(source: FileFormat, target: FileFormat) -> bool:
    """True when no conversion is needed between ``source`` and ``target``.

    CSV and TXT count as one family regardless of their delimiters, so a
    comma CSV "converted" to TXT is returned byte-identical.
    """
    if source == target:
        return True
    return source.is_tabular and target.is_tabular
