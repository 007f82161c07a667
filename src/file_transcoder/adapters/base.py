from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from file_transcoder import codec
from file_transcoder.formats import FileFormat
from file_transcoder.records import Dataset
from file_transcoder.settings import TranscodeConfig
from file_transcoder.transforms import TransformContext, TransformRegistry


class FormatAdapter(ABC):
    """Converts between one native format and a :data:`Dataset`.

    ``decode`` runs the registry's decode hooks on every record it produces;
    ``encode`` runs the encode hooks before rendering.
    """

    format: FileFormat

    def __init__(
        self,
        registry: Optional[TransformRegistry] = None,
        config: Optional[TranscodeConfig] = None,
    ):
        self.registry = registry or TransformRegistry.default()
        self.config = config or TranscodeConfig()

    @abstractmethod
    def read(self, path: Path) -> Any:
        """Load the native representation from ``path``."""

    @abstractmethod
    def decode(self, native: Any, ctx: TransformContext, delimiter: Optional[str] = None) -> Dataset:
        ...

    @abstractmethod
    def encode(self, dataset: Dataset, ctx: TransformContext, delimiter: Optional[str] = None) -> str:
        ...

    def _to_records(self, entities: Iterable[Mapping[str, Any]], ctx: TransformContext) -> Dataset:
        return [
            self.registry.decode_record(codec.flatten(entity, ctx.separator), ctx)
            for entity in entities
        ]

    def _to_trees(self, dataset: Dataset, ctx: TransformContext) -> list:
        encoded = self.registry.encode_dataset(dataset, ctx)
        return codec.unflatten(encoded, ctx.separator)
