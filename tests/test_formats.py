import pytest

from file_transcoder.errors import UnsupportedFormatError
from file_transcoder.formats import FileFormat, same_family


@pytest.mark.parametrize("name", ["json", "JSON", ".json", " json "])
def test_parse_names(name):
    assert FileFormat.parse(name) is FileFormat.JSON


def test_from_path():
    assert FileFormat.from_path("uploads/Data.XML") is FileFormat.XML
    assert FileFormat.from_path("a.b.txt") is FileFormat.TXT


@pytest.mark.parametrize("path", ["a.unknown", "noext", "a.yaml"])
def test_from_path_unsupported(path):
    with pytest.raises(UnsupportedFormatError):
        FileFormat.from_path(path)


def test_parse_unsupported():
    with pytest.raises(UnsupportedFormatError):
        FileFormat.parse(None)


def test_families():
    assert FileFormat.JSON.is_structured and FileFormat.XML.is_structured
    assert FileFormat.CSV.is_tabular and FileFormat.TXT.is_tabular
    assert same_family(FileFormat.CSV, FileFormat.TXT)
    assert same_family(FileFormat.XML, FileFormat.XML)
    assert not same_family(FileFormat.JSON, FileFormat.XML)
    assert not same_family(FileFormat.CSV, FileFormat.JSON)
