from __future__ import annotations

import re
from pathlib import Path
from typing import Any, List, Optional

import xmltodict

from file_transcoder.adapters.base import FormatAdapter
from file_transcoder.constants import XML_TEXT_KEY
from file_transcoder.errors import InvalidXmlFormatError
from file_transcoder.file_handler import read_xml
from file_transcoder.formats import FileFormat
from file_transcoder.records import Dataset
from file_transcoder.transforms import TransformContext

_NAME_INVALID_RE = re.compile(r"[^\w.\-]")
_NAME_START_RE = re.compile(r"[^\W\d]")


def xml_name(key: str) -> str:
    """Turn a field name into a legal element name.

    Characters outside letters, digits, ``_``, ``.`` and ``-`` become ``_``;
    a name that does not start with a letter or ``_`` gets a ``_`` prefix.
    """
    name = _NAME_INVALID_RE.sub("_", str(key))
    if not _NAME_START_RE.match(name):
        name = "_" + name
    return name


def _xml_names(node: Any) -> Any:
    if isinstance(node, dict):
        return {xml_name(k): _xml_names(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_xml_names(v) for v in node]
    return node


class XmlAdapter(FormatAdapter):
    """Collections shaped like ``<root><item>...</item>...</root>``.

    On decode the root element name and the repeated child name can be
    anything; the first child of the root holds the entity (or entities).
    On encode the configured ``xml_root``/``xml_item`` names are used.
    """

    format = FileFormat.XML

    def read(self, path: Path) -> Any:
        return read_xml(path, encoding=self.config.encoding)

    def decode(self, native: Any, ctx: TransformContext, delimiter: Optional[str] = None) -> Dataset:
        return self._to_records(self._entities(native), ctx)

    @staticmethod
    def _entities(tree: Any) -> List[dict]:
        if not isinstance(tree, dict) or len(tree) != 1:
            raise InvalidXmlFormatError("Invalid xml format: expected a single root element")
        root = next(iter(tree.values()))
        if not isinstance(root, dict) or not root:
            raise InvalidXmlFormatError("Invalid xml format: root element has no children")

        # Root attributes come through as plain keys; prefer the first
        # child that is an element.
        children = list(root.values())
        entity_list = next(
            (c for c in children if isinstance(c, (dict, list))), children[0]
        )
        items = entity_list if isinstance(entity_list, list) else [entity_list]

        entities = []
        for item in items:
            if item is None:
                entities.append({})
            elif isinstance(item, dict):
                entities.append(item)
            else:
                raise InvalidXmlFormatError(
                    f"Invalid xml format: entity must be an element, got {item!r}"
                )
        return entities

    def encode(self, dataset: Dataset, ctx: TransformContext, delimiter: Optional[str] = None) -> str:
        trees = _xml_names(self._to_trees(dataset, ctx))
        doc = {self.config.xml_root: {self.config.xml_item: trees}}
        return xmltodict.unparse(doc, pretty=True, indent="  ", cdata_key=XML_TEXT_KEY)
