"""Command-line interface for browsing the Lookbook directory."""

from lookbook.cli.main import app

__all__ = ["app"]
