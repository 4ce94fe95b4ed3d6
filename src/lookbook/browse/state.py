"""Browse/navigate state machine.

The browse surface is always exactly one of three variants:

    GridView(mode)                       paged cards
    ListView(mode)                       long filtered list
    DetailView(mode, slug, origin, status)

``mode`` is people or projects. A detail state cannot exist without a slug,
and it always carries a status, so "detail with nothing to show and no
error" is unrepresentable. Transition functions are pure: they take a state
and return the next one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import ClassVar, assert_never

import httpx

from lookbook.errors import InvalidTransitionError, ValidationError
from lookbook.models.entities import EntityMode, LayoutMode


class DetailStatus(StrEnum):
    """What a detail state is currently able to show."""

    LOADING = "loading"
    READY = "ready"
    NOT_FOUND = "not_found"  # terminal for this navigation
    FAILED = "failed"


@dataclass(frozen=True)
class GridView:
    mode: EntityMode
    layout: ClassVar[LayoutMode] = LayoutMode.GRID


@dataclass(frozen=True)
class ListView:
    mode: EntityMode
    layout: ClassVar[LayoutMode] = LayoutMode.LIST


@dataclass(frozen=True)
class DetailView:
    mode: EntityMode
    slug: str
    origin: GridView | ListView | None = None
    status: DetailStatus = DetailStatus.LOADING
    layout: ClassVar[LayoutMode] = LayoutMode.DETAIL

    def __post_init__(self) -> None:
        if not self.slug:
            raise ValidationError("Detail state requires a slug", details={"mode": self.mode})

    @property
    def return_to(self) -> GridView | ListView:
        """Layout the user came from; grid when the detail was opened directly."""
        if self.origin is not None and self.origin.mode == self.mode:
            return self.origin
        return GridView(self.mode)


type BrowseState = GridView | ListView | DetailView


# =============================================================================
# Routes
# =============================================================================


@dataclass(frozen=True)
class Route:
    """Path half of the browse location: ``/people``, ``/projects/<slug>``."""

    mode: EntityMode
    slug: str | None = None

    @classmethod
    def parse(cls, location: str) -> tuple[Route, httpx.QueryParams]:
        """Split a location into its route and query.

        Anything not under ``/projects`` browses people.
        """
        url = httpx.URL(location)
        segments = [segment for segment in url.path.split("/") if segment]
        mode = EntityMode.PEOPLE
        if segments and segments[0] == EntityMode.PROJECTS.value:
            mode = EntityMode.PROJECTS
        slug = None
        if len(segments) >= 2 and segments[0] in (EntityMode.PEOPLE, EntityMode.PROJECTS):
            slug = segments[1]
        return cls(mode=mode, slug=slug), url.params

    @property
    def path(self) -> str:
        return f"/{self.mode.value}/{self.slug}" if self.slug else f"/{self.mode.value}"

    def with_query(self, params: httpx.QueryParams | None) -> str:
        query = str(params) if params else ""
        return f"{self.path}?{query}" if query else self.path


def route_for(state: BrowseState) -> Route:
    match state:
        case DetailView(mode=mode, slug=slug):
            return Route(mode, slug)
        case GridView(mode=mode) | ListView(mode=mode):
            return Route(mode)
        case _:
            assert_never(state)


# =============================================================================
# Transitions
# =============================================================================


def _origin_of(state: BrowseState) -> GridView | ListView | None:
    match state:
        case GridView() | ListView():
            return state
        case DetailView(origin=origin):
            return origin
        case _:
            assert_never(state)


def initial_state(route: Route) -> BrowseState:
    """A slug forces detail, its absence forces grid."""
    if route.slug:
        return DetailView(route.mode, route.slug)
    return GridView(route.mode)


def on_route_change(state: BrowseState, route: Route) -> BrowseState:
    """Re-derive mode and layout from a new route.

    The resulting detail state always starts out ``LOADING`` so nothing from
    the previous entity is shown while the new one loads.
    """
    if route.slug:
        origin = _origin_of(state)
        if origin is not None and origin.mode != route.mode:
            origin = None
        return DetailView(route.mode, route.slug, origin=origin)
    return GridView(route.mode)


def select(state: BrowseState, slug: str) -> DetailView:
    """Open the detail view for ``slug`` (card click or sequential step)."""
    return DetailView(state.mode, slug, origin=_origin_of(state))


def toggle_layout(
    state: BrowseState, target: LayoutMode, first_slug: str | None = None
) -> BrowseState:
    """Layout toggle buttons.

    Going to detail without a selected item opens ``first_slug`` (the first
    item of the filtered collection); with nothing to open it is a no-op.
    """
    match target:
        case LayoutMode.GRID:
            return GridView(state.mode)
        case LayoutMode.LIST:
            return ListView(state.mode)
        case LayoutMode.DETAIL:
            if isinstance(state, DetailView) or not first_slug:
                return state
            return select(state, first_slug)
        case _:
            assert_never(target)


def switch_tab(state: BrowseState, mode: EntityMode) -> GridView:
    """People/projects tab: always lands on that mode's grid."""
    return GridView(mode)


def back(state: BrowseState) -> BrowseState:
    if isinstance(state, DetailView):
        return state.return_to
    return state


def resolve_detail(state: BrowseState, status: DetailStatus) -> DetailView:
    """Record the outcome of a detail load."""
    if not isinstance(state, DetailView):
        raise InvalidTransitionError(state.layout.value, f"detail:{status.value}")
    return replace(state, status=status)


# =============================================================================
# View hints
# =============================================================================


@dataclass(frozen=True)
class ViewHint:
    """Presentation side effects derived from state, applied by the host UI."""

    lock_scroll: bool = False


def view_hint(
    state: BrowseState,
    item_count: int,
    viewport_width: int,
    *,
    min_width: int = 1536,
    full_page: int = 8,
) -> ViewHint:
    """Lock page scrolling when a wide grid shows exactly one full 4x2 page."""
    lock = (
        isinstance(state, GridView) and viewport_width >= min_width and item_count == full_page
    )
    return ViewHint(lock_scroll=lock)
