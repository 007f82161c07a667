"""Error kinds surfaced by the transcoding pipeline.

Every error raised inside decode/transform/encode is either one of the
named kinds below or gets wrapped into :class:`ProcessingError` at the
orchestrator boundary. Callers (an HTTP layer, the CLI) only need to look
at ``kind`` or ``http_status``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    FILE_NOT_FOUND = "file_not_found"
    UNSUPPORTED_FORMAT = "unsupported_format"
    INVALID_XML_FORMAT = "invalid_xml_format"
    EMPTY_CSV = "empty_csv"
    INVALID_KEY = "invalid_key"
    UNSUPPORTED_GEOMETRY = "unsupported_geometry_conversion"
    PROCESSING = "processing_error"


# Kinds caused by what the client sent rather than by a failure on our side.
CLIENT_ERROR_KINDS = frozenset(
    {ErrorKind.UNSUPPORTED_FORMAT, ErrorKind.UNSUPPORTED_GEOMETRY}
)


class TranscodeError(Exception):
    """Base class for all recognized pipeline errors."""

    kind: ErrorKind = ErrorKind.PROCESSING

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def is_client_error(self) -> bool:
        return self.kind in CLIENT_ERROR_KINDS

    @property
    def http_status(self) -> int:
        return 400 if self.is_client_error else 500


class SourceNotFoundError(TranscodeError, FileNotFoundError):
    """The input file does not exist."""

    kind = ErrorKind.FILE_NOT_FOUND


class UnsupportedFormatError(TranscodeError):
    """Source extension or target format is not one of json/xml/csv/txt."""

    kind = ErrorKind.UNSUPPORTED_FORMAT


class InvalidXmlFormatError(TranscodeError):
    kind = ErrorKind.INVALID_XML_FORMAT


class EmptyCsvError(TranscodeError):
    kind = ErrorKind.EMPTY_CSV


class InvalidKeyError(TranscodeError):
    kind = ErrorKind.INVALID_KEY


class UnsupportedGeometryConversion(TranscodeError):
    kind = ErrorKind.UNSUPPORTED_GEOMETRY


class ProcessingError(TranscodeError):
    """Catch-all wrapper; the original exception is kept as ``__cause__``."""

    kind = ErrorKind.PROCESSING
