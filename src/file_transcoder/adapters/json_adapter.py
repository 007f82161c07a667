from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from file_transcoder.adapters.base import FormatAdapter
from file_transcoder.file_handler import read_json
from file_transcoder.formats import FileFormat
from file_transcoder.records import Dataset
from file_transcoder.transforms import TransformContext


class JsonAdapter(FormatAdapter):
    """A bare object is one record; an array gives one record per element."""

    format = FileFormat.JSON

    def read(self, path: Path) -> Any:
        return read_json(path, encoding=self.config.encoding)

    def decode(self, native: Any, ctx: TransformContext, delimiter: Optional[str] = None) -> Dataset:
        entities = native if isinstance(native, list) else [native]
        return self._to_records(entities, ctx)

    def encode(self, dataset: Dataset, ctx: TransformContext, delimiter: Optional[str] = None) -> str:
        return json.dumps(self._to_trees(dataset, ctx), ensure_ascii=False, indent=2)
