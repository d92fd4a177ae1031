"""Logging configuration using structlog.

Modules log through the stdlib API::

    import logging
    logger = logging.getLogger(__name__)
    logger.warning("%s %s cannot get code %s", name, address, exc)

Call ``configure_logging()`` once from the CLI entry-point; records are then
rendered by structlog's ``ProcessorFormatter`` on stderr so that stdout stays
free for command output (e.g. ``solgrab fetch`` prints the source there).
"""

from __future__ import annotations

import logging
import sys

import structlog

_HANDLER_NAME = "solgrab"


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Route stdlib logging through structlog.

    Uses structlog's ``ConsoleRenderer`` by default and ``JSONRenderer`` when
    *json_logs* is set.  Calling this more than once replaces the handler
    installed by the previous call; handlers added by others are left alone.

    Args:
        log_level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"``,
            ``"CRITICAL"``.  Case-insensitive; unknown values mean INFO.
        json_logs: Emit newline-delimited JSON instead of console lines.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        final_renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        final_renderer = structlog.dev.ConsoleRenderer(colors=False)

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    # httpx logs every request at INFO.
    if numeric_level > logging.DEBUG:
        for noisy_logger in ("httpx", "httpcore"):
            logging.getLogger(noisy_logger).setLevel(logging.WARNING)
