"""structlog rendering for the ``nextmatch`` logger.

nextmatch logs through stdlib ``logging``. :func:`configure_logging` gives
the ``nextmatch`` logger its own stderr handler whose formatter is a
structlog ``ProcessorFormatter``, rendering records as console lines or JSON.
The root logger and the process-wide structlog configuration belong to the
host application and are never touched.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from nextmatch.config.settings import NextMatchSettings

LOGGER_NAME = "nextmatch"


class _NextMatchHandler(logging.StreamHandler):
    """Marker type so reconfiguring replaces our handler and nothing else."""


def _formatter(log_json: bool) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route ``nextmatch`` log records to stderr.

    Args:
        verbose: Emit DEBUG records. When False, only WARNING and above.
        log_json: One JSON object per line instead of console output.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in logger.handlers if isinstance(h, _NextMatchHandler)]:
        logger.removeHandler(existing)

    handler = _NextMatchHandler(sys.stderr)
    handler.setFormatter(_formatter(log_json))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def configure_from_settings(settings: NextMatchSettings) -> None:
    """Apply the ``[logging]`` section of *settings*."""
    configure_logging(verbose=settings.logging.verbose, log_json=settings.logging.log_json)
