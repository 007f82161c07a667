"""
pipeline.py

Transcode orchestrator: one input file in, base64 text of the converted
content out.

States::

    NO_SOURCE -> NEEDS_DECISION -> PASSTHROUGH  -> DONE
                                -> TRANSCODING  -> DONE
    (any)     -> FAILED

- No conversion happens when the source extension equals the target format
  or when both are delimited text (csv <-> txt, whatever the delimiters).
  The raw bytes are returned as-is.
- Otherwise the source adapter decodes the file (card values get tokenized),
  the tokenization policy runs, and the target adapter encodes the result.
- Errors of a recognized kind pass through; anything else is wrapped into
  ``ProcessingError``. The input file is removed on every exit path.
"""
from __future__ import annotations

import base64
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from file_transcoder.adapters import FormatAdapter, build_adapters
from file_transcoder.constants import TEXT_ENCODING
from file_transcoder.errors import ProcessingError, SourceNotFoundError, TranscodeError
from file_transcoder.file_handler import file_exists, read_bytes, remove_file
from file_transcoder.formats import FileFormat, same_family
from file_transcoder.logging_setup import get_logger
from file_transcoder.records import Dataset
from file_transcoder.settings import Settings, get_settings
from file_transcoder.transforms import TransformContext, TransformRegistry

log = get_logger(__name__)


class TranscodeState(str, Enum):
    NO_SOURCE = "no_source"
    NEEDS_DECISION = "needs_decision"
    PASSTHROUGH = "passthrough"
    TRANSCODING = "transcoding"
    DONE = "done"
    FAILED = "failed"


class TokenPolicy(str, Enum):
    KEEP = "keep"
    DETOKENIZE = "detokenize"


def needs_conversion(source: FileFormat, target: FileFormat) -> bool:
    return not same_family(source, target)


def token_policy(source: FileFormat, target: FileFormat) -> TokenPolicy:
    """What happens to tokenized card values between decode and encode.

    Structured -> tabular detokenizes. Structured <-> structured and
    tabular -> structured keep the token produced at decode time.
    """
    if source.is_structured and target.is_tabular:
        return TokenPolicy.DETOKENIZE
    return TokenPolicy.KEEP


class Transcoder:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[TransformRegistry] = None,
        adapters: Optional[Dict[FileFormat, FormatAdapter]] = None,
    ):
        self.settings = settings or get_settings()
        self.registry = registry or TransformRegistry.default()
        if adapters is None:
            adapters = build_adapters(self.registry, self.settings.transcode)
        self.adapters = adapters

    def adapter(self, fmt: FileFormat) -> FormatAdapter:
        return self.adapters[fmt]

    def _context(self, source: FileFormat, target: FileFormat, secret_key: str) -> TransformContext:
        cfg = self.settings.transcode
        return TransformContext(
            source=source,
            target=target,
            secret_key=secret_key,
            algorithm=cfg.token_algorithm,
            separator=cfg.separator,
        )

    def transcode(
        self,
        input_ref: Union[str, Path],
        secret_key: str,
        target_format: Union[str, FileFormat],
        delimiter: Optional[str] = None,
    ) -> str:
        """Convert the file at ``input_ref`` and return base64 text.

        The input file is deleted before returning, whatever the outcome.
        """
        path = Path(input_ref)
        run_log = log.bind(input=str(path), target=str(getattr(target_format, "value", target_format)))
        state = TranscodeState.NO_SOURCE
        try:
            if not file_exists(path):
                raise SourceNotFoundError(f"File not found: {path}")
            state = self._enter(run_log, TranscodeState.NEEDS_DECISION)
            source = FileFormat.from_path(path)
            target = FileFormat.parse(target_format)

            if not needs_conversion(source, target):
                state = self._enter(run_log, TranscodeState.PASSTHROUGH, source=source.value)
                content = read_bytes(path)
            else:
                state = self._enter(run_log, TranscodeState.TRANSCODING, source=source.value)
                native = self.adapter(source).read(path)
                content = self.convert(native, source, target, secret_key, delimiter).encode(
                    TEXT_ENCODING
                )

            state = self._enter(run_log, TranscodeState.DONE, size=len(content))
            return base64.b64encode(content).decode("ascii")
        except TranscodeError as e:
            self._fail(run_log, state, kind=e.kind.value, error=e.message)
            raise
        except Exception as e:
            self._fail(run_log, state, error=str(e), exc_info=True)
            raise ProcessingError(str(e) or "Error processing file") from e
        finally:
            self._cleanup(path, run_log)

    def convert(
        self,
        native: Any,
        source: FileFormat,
        target: FileFormat,
        secret_key: str,
        delimiter: Optional[str] = None,
    ) -> str:
        """Decode ``native`` (already read from a ``source`` file) and render it as ``target``."""
        ctx = self._context(source, target, secret_key)
        dataset = self.adapter(source).decode(native, ctx, delimiter)
        dataset = self.apply_token_policy(dataset, ctx)
        return self.adapter(target).encode(dataset, ctx, delimiter)

    def apply_token_policy(self, dataset: Dataset, ctx: TransformContext) -> Dataset:
        policy = token_policy(ctx.source, ctx.target)
        log.debug("Token policy", policy=policy.value, source=ctx.source.value, target=ctx.target.value)
        if policy is TokenPolicy.DETOKENIZE:
            return self.registry.revert(dataset, ctx)
        return dataset

    @staticmethod
    def _enter(run_log, state: TranscodeState, **kw) -> TranscodeState:
        run_log.debug("Transcode state", state=state.value, **kw)
        return state

    @staticmethod
    def _fail(run_log, failed_in: TranscodeState, **kw) -> None:
        run_log.error(
            "Transcode failed", state=TranscodeState.FAILED.value, failed_in=failed_in.value, **kw
        )

    @staticmethod
    def _cleanup(path: Path, run_log) -> None:
        try:
            remove_file(path)
        except OSError as e:
            run_log.warning("Temporary file not removed", error=str(e))
            return
        run_log.info("Temporary file removed")


def transcode(
    input_ref: Union[str, Path],
    secret_key: str,
    target_format: Union[str, FileFormat],
    delimiter: Optional[str] = None,
) -> str:
    """Module-level shortcut for :meth:`Transcoder.transcode` with default settings."""
    return Transcoder().transcode(input_ref, secret_key, target_format, delimiter)
