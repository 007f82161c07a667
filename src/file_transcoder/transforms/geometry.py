"""Polygon conversion between GeoJSON, WKT and the bare ring text used in
delimited files.

Each format has its own native shape for the ``poligono`` field:

- JSON: a GeoJSON ``FeatureCollection`` with one Polygon feature
- XML: WKT, ``POLYGON ((x1 y1, x2 y2, ...))``
- CSV/TXT: the WKT body without the tag, ``((x1 y1, x2 y2, ...))``

Only the outer ring of a single polygon survives a conversion; holes and
extra features are dropped.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from file_transcoder.errors import UnsupportedGeometryConversion
from file_transcoder.formats import FileFormat
from file_transcoder.logging_setup import get_logger

log = get_logger(__name__)

_WKT_POLYGON_RE = re.compile(r"POLYGON\s*\(\(\s*(.*?)\s*\)\)", re.IGNORECASE | re.DOTALL)
_RING_RE = re.compile(r"\(\(\s*(.*?)\s*\)", re.DOTALL)

Ring = List[List[float]]

# (source, target) pairs with a conversion rule
_RULES = {
    (FileFormat.XML, FileFormat.JSON),
    (FileFormat.CSV, FileFormat.JSON),
    (FileFormat.TXT, FileFormat.JSON),
    (FileFormat.JSON, FileFormat.XML),
    (FileFormat.CSV, FileFormat.XML),
    (FileFormat.TXT, FileFormat.XML),
    (FileFormat.JSON, FileFormat.CSV),
    (FileFormat.JSON, FileFormat.TXT),
    (FileFormat.XML, FileFormat.CSV),
    (FileFormat.XML, FileFormat.TXT),
}


def _num(text: Any) -> float:
    n = float(text)
    return int(n) if n.is_integer() else n


def _fmt(n: Any) -> str:
    n = _num(n)
    return str(n) if isinstance(n, int) else repr(n)


def parse_ring_text(text: str) -> Optional[Ring]:
    """Parse a WKT polygon or a bare ``((...))`` ring into coordinate pairs."""
    match = _WKT_POLYGON_RE.search(text) or _RING_RE.search(text)
    if not match:
        return None
    ring: Ring = []
    for pair in match.group(1).split(","):
        parts = pair.split()
        if not parts:
            continue
        try:
            ring.append([_num(p) for p in parts])
        except ValueError:
            return None
    return ring or None


def _as_ring(value: list) -> Optional[Ring]:
    # Unwrap polygon coordinates (list of rings) down to the first ring.
    while value and isinstance(value[0], list) and value[0] and isinstance(value[0][0], list):
        value = value[0]
    if not value or not all(isinstance(p, list) and p for p in value):
        return None
    try:
        return [[_num(c) for c in pair] for pair in value]
    except (TypeError, ValueError):
        return None


def extract_ring(value: Any) -> Optional[Ring]:
    """Find the outer ring in any of the supported geometry shapes."""
    if isinstance(value, str):
        return parse_ring_text(value)
    if isinstance(value, list):
        return _as_ring(value)
    if isinstance(value, Mapping):
        features = value.get("features")
        if isinstance(features, list) and features:
            return extract_ring(features[0])
        for key in ("geometry", "coordinates"):
            if key in value:
                return extract_ring(value[key])
    return None


def ring_to_geojson(ring: Ring) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "crs": {"type": "name", "properties": {"name": "EPSG:4326"}},
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Polygon", "coordinates": [ring]},
                "properties": {"Land Use": "I"},
            }
        ],
    }


def ring_to_text(ring: Ring) -> str:
    """Bare ring form used inside delimited cells: ``((x y, x y))``."""
    return "((" + ", ".join(" ".join(_fmt(c) for c in pair) for pair in ring) + "))"


def ring_to_wkt(ring: Ring) -> str:
    return "POLYGON " + ring_to_text(ring)


def is_supported(source: FileFormat, target: FileFormat) -> bool:
    return (source, target) in _RULES


def convert_geometry(value: Any, source: FileFormat, target: FileFormat) -> Any:
    """Convert a geometry value currently encoded as ``source`` into ``target``.

    Values holding no recognizable polygon are returned unchanged.
    """
    if not is_supported(source, target):
        raise UnsupportedGeometryConversion(
            f"No geometry conversion from {source.value} to {target.value}"
        )
    ring = extract_ring(value)
    if ring is None:
        log.debug("No polygon found, keeping value", source=source.value, target=target.value)
        return value
    if target == FileFormat.JSON:
        return ring_to_geojson(ring)
    if target == FileFormat.XML:
        return ring_to_wkt(ring)
    return ring_to_text(ring)
