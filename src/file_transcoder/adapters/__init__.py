from typing import Dict, Optional

from file_transcoder.formats import FileFormat
from file_transcoder.settings import TranscodeConfig
from file_transcoder.transforms import TransformRegistry

from .base import FormatAdapter
from .delimited import DelimitedAdapter
from .json_adapter import JsonAdapter
from .xml_adapter import XmlAdapter


def build_adapters(
    registry: Optional[TransformRegistry] = None,
    config: Optional[TranscodeConfig] = None,
) -> Dict[FileFormat, FormatAdapter]:
    """One adapter per format, sharing the registry and config."""
    registry = registry or TransformRegistry.default()
    return {
        FileFormat.JSON: JsonAdapter(registry, config),
        FileFormat.XML: XmlAdapter(registry, config),
        FileFormat.CSV: DelimitedAdapter(FileFormat.CSV, registry, config),
        FileFormat.TXT: DelimitedAdapter(FileFormat.TXT, registry, config),
    }


__all__ = [
    "DelimitedAdapter",
    "FormatAdapter",
    "JsonAdapter",
    "XmlAdapter",
    "build_adapters",
]
