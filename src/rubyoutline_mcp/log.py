"""Structured logging for the server and tools.

Logs always go to stderr: stdout carries the MCP stdio stream.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

LOG_LEVEL_ENV = "RUBYOUTLINE_LOG_LEVEL"
LOG_FORMAT_ENV = "RUBYOUTLINE_LOG_FORMAT"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def configure_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: Log level name; defaults to $RUBYOUTLINE_LOG_LEVEL or WARNING
        json_format: Render JSON lines; defaults to $RUBYOUTLINE_LOG_FORMAT == "json"
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if json_format is None:
        json_format = os.environ.get(LOG_FORMAT_ENV, "").lower() == "json"

    default_level = _LEVEL_MAP.get(level.upper(), logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), pad_event_to=0)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(default_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)
    root_logger.addHandler(handler)

    # Per-request chatter from the MCP SDK
    logging.getLogger("mcp.server.lowlevel.server").setLevel(logging.WARNING)
