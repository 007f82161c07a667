"""CSV and generic delimited text.

Both formats share one adapter; only the default delimiter differs (``,``
for CSV, ``;`` for TXT). Cells are split on the delimiter literally, so a
delimiter inside a quoted value is not supported.
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from file_transcoder.adapters.base import FormatAdapter
from file_transcoder.constants import GEOMETRY_FIELD
from file_transcoder.errors import EmptyCsvError
from file_transcoder.file_handler import read_text
from file_transcoder.formats import FileFormat
from file_transcoder.records import Dataset, FieldEntry, Record
from file_transcoder.settings import TranscodeConfig
from file_transcoder.transforms import TransformContext, TransformRegistry
from file_transcoder.transforms.registry import is_coordinates_key


class DelimitedAdapter(FormatAdapter):
    def __init__(
        self,
        fmt: FileFormat = FileFormat.CSV,
        registry: Optional[TransformRegistry] = None,
        config: Optional[TranscodeConfig] = None,
    ):
        super().__init__(registry, config)
        if not fmt.is_tabular:
            raise ValueError(f"{fmt.value} is not a delimited format")
        self.format = fmt

    def delimiter(self, override: Optional[str] = None) -> str:
        delimiter = override or self.config.default_delimiter(self.format)
        if not delimiter:
            raise ValueError("Delimiter must not be empty")
        return delimiter

    def read(self, path: Path) -> str:
        return read_text(path, encoding=self.config.encoding)

    def decode(self, native: str, ctx: TransformContext, delimiter: Optional[str] = None) -> Dataset:
        sep = self.delimiter(delimiter)
        lines = [line for line in re.split(r"\r?\n", native) if line.strip()]
        if len(lines) < 2:
            raise EmptyCsvError(
                f"{self.format.value.upper()} must have a header and at least one row"
            )

        headers = [h.strip() for h in lines[0].split(sep)]
        dataset: Dataset = []
        for line in lines[1:]:
            cells = [_clean_cell(c) for c in line.split(sep)]
            entries = [
                FieldEntry(key, cells[i] if i < len(cells) else "")
                for i, key in enumerate(headers)
            ]
            dataset.append(self.registry.decode_record(Record(entries), ctx))
        return dataset

    def encode(self, dataset: Dataset, ctx: TransformContext, delimiter: Optional[str] = None) -> str:
        sep = self.delimiter(delimiter)
        rows = [_column_map(r) for r in self.registry.encode_dataset(dataset, ctx)]
        if not rows:
            return ""

        header = header_for(rows)
        lines = [sep.join(header)]
        for row in rows:
            lines.append(sep.join(f'"{render_cell(row.get(col, ""))}"' for col in header))
        return "\n".join(lines)


def column_name(key: str) -> str:
    """Keys holding polygon coordinates all land in the ``poligono`` column."""
    return GEOMETRY_FIELD if is_coordinates_key(key) else key


def _column_map(record: Record) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for entry in record:
        out[column_name(entry.key)] = entry.value
    return out


def header_for(rows: List[Dict[str, Any]]) -> List[str]:
    """Union of columns across rows, in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for col in row:
            seen.setdefault(col, None)
    return list(seen)


def render_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _clean_cell(cell: str) -> str:
    cell = cell.strip()
    if cell.startswith('"'):
        cell = cell[1:]
    if cell.endswith('"'):
        cell = cell[:-1]
    return cell
