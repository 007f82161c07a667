"""Filesystem collaborators for the pipeline.

The pipeline consumes a temporary input file (an upload) and removes it
when done. ``stage_upload`` creates such a file from a user's file so the
original is never deleted.
"""
from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Union

import xmltodict

from file_transcoder.constants import READ_ENCODING, XML_TEXT_KEY

PathLike = Union[str, Path]


def file_exists(path: PathLike) -> bool:
    return Path(path).is_file()


def read_bytes(path: PathLike) -> bytes:
    return Path(path).read_bytes()


def read_text(path: PathLike, encoding: str = READ_ENCODING) -> str:
    with open(path, "r", encoding=encoding) as fh:
        return fh.read()


def read_json(path: PathLike, encoding: str = READ_ENCODING) -> Any:
    with open(path, "r", encoding=encoding) as fh:
        return json.load(fh)


def read_xml(path: PathLike, encoding: str = READ_ENCODING) -> Any:
    """Parse XML into a nested dict; attributes become plain keys (no '@')."""
    return xmltodict.parse(read_text(path, encoding), attr_prefix="", cdata_key=XML_TEXT_KEY)


def remove_file(path: PathLike) -> bool:
    """Delete ``path`` if present. Returns True either way."""
    Path(path).unlink(missing_ok=True)
    return True


def stage_upload(path: PathLike) -> Path:
    """Copy ``path`` into a fresh temp directory and return the copy's path.

    The file name (and so the extension) is preserved.
    """
    src = Path(path)
    if not src.is_file():
        raise FileNotFoundError(f"File not found: {src}")
    tmp_dir = Path(tempfile.mkdtemp(prefix="file-transcoder-"))
    dest = tmp_dir / src.name
    shutil.copyfile(src, dest)
    return dest
