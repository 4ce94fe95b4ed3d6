"""
lookbook: browse, filter and navigate the Lookbook people and projects directory.

This package provides:
- Domain models (Profile, Project, facets, media)
- Facet filters, pagination and the browse/detail state machine
- A browse session that drives them against a data source
- An async HTTP client for the Lookbook API
- The `lookbook` CLI
"""

from lookbook._version import __version__, get_version
from lookbook.errors import (
    EntityNotFoundError,
    FetchError,
    InvalidTransitionError,
    LookbookError,
    ValidationError,
)

__all__ = [
    "EntityNotFoundError",
    "FetchError",
    "InvalidTransitionError",
    "LookbookError",
    "ValidationError",
    "__version__",
    "get_version",
]
