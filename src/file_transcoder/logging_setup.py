"""structlog setup for the transcoder.

Events are rendered on stderr: stdout belongs to the CLI, which prints the
transcoded payload there.
"""
import logging
import os
import sys
from typing import List

import structlog
from structlog.types import FilteringBoundLogger, Processor

HUMAN_ENV_VAR = "FILE_TRANSCODER_LOG_HUMAN"

_CALLSITE = structlog.processors.CallsiteParameterAdder(
    parameters=[
        structlog.processors.CallsiteParameter.FILENAME,
        structlog.processors.CallsiteParameter.FUNC_NAME,
        structlog.processors.CallsiteParameter.LINENO,
    ]
)


def _human_requested(format_type: str) -> bool:
    if format_type == "human":
        return True
    return os.getenv(HUMAN_ENV_VAR, "").lower() in ("1", "true", "yes")


def _processors(human: bool, structured: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if structured:
        processors.append(_CALLSITE)
    if human:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging(
    level: str = "INFO", format_type: str = "json", structured: bool = True
) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: DEBUG, INFO, WARNING or ERROR; unknown names fall back to INFO
        format_type: "json" (one object per line) or "human" (console)
        structured: add filename, function and line number to each event

    Safe to call more than once; the CLI calls it per invocation.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=_processors(_human_requested(format_type), structured),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "file_transcoder") -> FilteringBoundLogger:
    """Structured logger, e.g. ``get_logger(__name__).info("Token policy", policy="keep")``."""
    return structlog.get_logger(name)
