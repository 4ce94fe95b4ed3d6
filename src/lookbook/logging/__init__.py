"""Structured logging for Lookbook components."""

from lookbook.logging.config import configure_logging, get_logger
from lookbook.logging.formatters import LookbookRenderer

__all__ = [
    "LookbookRenderer",
    "configure_logging",
    "get_logger",
]
