"""Browsing engine: filters, paging, state machine, navigation and the session."""

from lookbook.browse.cross_filter import ProjectCarousel, filter_person_projects
from lookbook.browse.debounce import Debouncer
from lookbook.browse.filters import (
    ActiveFilters,
    FacetFilters,
    PeopleFilters,
    ProjectFilters,
    apply_filters,
    default_filters,
    include,
)
from lookbook.browse.navigator import Prefetcher, SequentialNavigator
from lookbook.browse.pagination import PaginationController
from lookbook.browse.progress import LoadingProgress
from lookbook.browse.session import BrowseSession
from lookbook.browse.state import (
    BrowseState,
    DetailStatus,
    DetailView,
    GridView,
    ListView,
    Route,
    ViewHint,
)

__all__ = [
    "ActiveFilters",
    "BrowseSession",
    "BrowseState",
    "Debouncer",
    "DetailStatus",
    "DetailView",
    "FacetFilters",
    "GridView",
    "ListView",
    "LoadingProgress",
    "PaginationController",
    "PeopleFilters",
    "Prefetcher",
    "ProjectCarousel",
    "ProjectFilters",
    "Route",
    "SequentialNavigator",
    "ViewHint",
    "apply_filters",
    "default_filters",
    "filter_person_projects",
    "include",
]
