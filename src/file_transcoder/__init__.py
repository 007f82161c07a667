"""
file_transcoder - convert structured data between JSON, XML, CSV and
delimited text, tokenizing card numbers and converting polygon geometry on
the way.
"""

from .errors import (
    EmptyCsvError,
    ErrorKind,
    InvalidKeyError,
    InvalidXmlFormatError,
    ProcessingError,
    SourceNotFoundError,
    TranscodeError,
    UnsupportedFormatError,
    UnsupportedGeometryConversion,
)
from .formats import FileFormat
from .pipeline import Transcoder, transcode

__version__ = "0.1.0"
__all__ = [
    "EmptyCsvError",
    "ErrorKind",
    "FileFormat",
    "InvalidKeyError",
    "InvalidXmlFormatError",
    "ProcessingError",
    "SourceNotFoundError",
    "TranscodeError",
    "Transcoder",
    "UnsupportedFormatError",
    "UnsupportedGeometryConversion",
    "transcode",
]
