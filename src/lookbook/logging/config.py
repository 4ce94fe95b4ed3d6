"""Logging setup for Lookbook.

Usage:
    from lookbook.logging import configure_logging, get_logger

    configure_logging(service_name="cli")
    log = get_logger()
    log.info("session_opened", location="/people")
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

from lookbook.logging.formatters import LookbookRenderer

_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    *,
    service_name: str = "lookbook",
    level: str = "INFO",
    colors: bool | None = None,
    json_output: bool = False,
) -> None:
    """Configure structlog once at startup.

    Args:
        service_name: Prefix shown on every console line.
        level: Minimum log level for stdlib loggers.
        colors: Force colors on/off; auto-detects a TTY or FORCE_COLOR when None.
        json_output: Emit JSON lines instead of the themed console format.
    """
    if colors is None:
        colors = sys.stderr.isatty() or os.environ.get("FORCE_COLOR", "") not in ("", "0")

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[logging.StreamHandler()],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer: structlog.typing.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = LookbookRenderer(service_name=service_name, colors=colors)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger, optionally named after the calling module."""
    return structlog.get_logger(name)
