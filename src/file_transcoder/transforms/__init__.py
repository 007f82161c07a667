from .geometry import convert_geometry, extract_ring
from .registry import (
    CardTokenTransform,
    FieldTransform,
    GeometryTransform,
    TransformContext,
    TransformRegistry,
)
from .tokens import CardTokenizer

__all__ = [
    "CardTokenTransform",
    "CardTokenizer",
    "FieldTransform",
    "GeometryTransform",
    "TransformContext",
    "TransformRegistry",
    "convert_geometry",
    "extract_ring",
]
