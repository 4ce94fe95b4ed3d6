"""Browse session: the state machine wired to its data sources.

A session owns everything one browsing surface needs: the current browse
state, per-mode filters and pages, the loaded collections, the displayed
detail record with its navigator and carousel, and the background work
(primary fetches, debounced search, neighbour prefetches).

Mutating operations are synchronous and schedule their fetches on the
running loop; ``await session.idle()`` waits for the primary work to land.

Usage:
    session = BrowseSession(people_source, projects_source)
    await session.open("/people?skills=Go")
    await session.idle()
    session.select(session.items[0].slug)
    await session.idle()
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from functools import partial
from typing import TYPE_CHECKING, Any, Literal

import httpx
import structlog

from lookbook.browse import state as transitions
from lookbook.browse.cross_filter import ProjectCarousel, filter_person_projects
from lookbook.browse.debounce import Debouncer
from lookbook.browse.filters import (
    FILTERS_BY_MODE,
    ActiveFilters,
    PeopleFilters,
    apply_filters,
    default_filters,
)
from lookbook.browse.navigator import Prefetcher, SequentialNavigator
from lookbook.browse.pagination import PaginationController, per_mode_pagination
from lookbook.browse.progress import LoadingProgress
from lookbook.browse.state import (
    BrowseState,
    DetailStatus,
    DetailView,
    GridView,
    ListView,
    Route,
    ViewHint,
    initial_state,
    on_route_change,
    resolve_detail,
    route_for,
    toggle_layout,
    view_hint,
)
from lookbook.config import BrowseSettings
from lookbook.errors import FetchError, ValidationError
from lookbook.models.entities import (
    EntityMode,
    LayoutMode,
    PeopleFacets,
    Profile,
    Project,
    ProjectFacets,
    ProjectSummary,
)

if TYPE_CHECKING:
    from lookbook.sources import EntitySource

log = structlog.get_logger()

Surface = Literal["browse", "detail"]


def _failure_message(mode: EntityMode) -> str:
    return f"Failed to load {mode.value}. Please try again."


class BrowseSession:
    """One people/projects browsing surface."""

    def __init__(
        self,
        people_source: EntitySource,
        projects_source: EntitySource,
        settings: BrowseSettings | None = None,
    ) -> None:
        self.settings = settings or BrowseSettings()
        self._sources: dict[EntityMode, EntitySource] = {
            EntityMode.PEOPLE: people_source,
            EntityMode.PROJECTS: projects_source,
        }

        self._state: BrowseState = GridView(EntityMode.PEOPLE)
        self._query = httpx.QueryParams()

        # Per-mode browse data
        self._filters: dict[EntityMode, ActiveFilters] = {
            mode: default_filters(mode) for mode in EntityMode
        }
        self._search: dict[EntityMode, Debouncer[str]] = {
            mode: Debouncer(
                "",
                delay=self.settings.search_debounce,
                on_settle=partial(self._on_search_settled, mode),
            )
            for mode in EntityMode
        }
        self._pagination = per_mode_pagination(self.settings.grid_page_size)
        self._items: dict[EntityMode, list[Any]] = {mode: [] for mode in EntityMode}
        self._errors: dict[EntityMode, str | None] = {mode: None for mode in EntityMode}
        self._facets: dict[EntityMode, PeopleFacets | ProjectFacets] = {
            EntityMode.PEOPLE: PeopleFacets(),
            EntityMode.PROJECTS: ProjectFacets(),
        }
        self._facet_errors: dict[EntityMode, str | None] = {mode: None for mode in EntityMode}

        # Detail data
        self._detail: Profile | Project | None = None
        self._navigator = SequentialNavigator()
        self._navigator_mode: EntityMode | None = None
        self._carousel = ProjectCarousel(self.settings.carousel_size)
        self._prefetchers: dict[EntityMode, Prefetcher] = {
            mode: Prefetcher(source.get_by_slug, delay=self.settings.prefetch_delay)
            for mode, source in self._sources.items()
        }

        self.progress = LoadingProgress()

        # One primary fetch per surface; the generation guards late commits
        self._tasks: dict[Surface, asyncio.Task[None]] = {}
        self._generation: dict[Surface, int] = {"browse": 0, "detail": 0}
        self._alive = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def open(self, location: str) -> None:
        """Mount at ``location``: derive state and filters, load facets, start loading."""
        route, query = Route.parse(location)
        self._alive = True
        self._query = query
        for mode in EntityMode:
            filters = FILTERS_BY_MODE[mode].from_query_params(query)
            self._filters[mode] = filters  # type: ignore[assignment]
            self._search[mode].reset(filters.search)
        self._state = initial_state(route)
        if not isinstance(self._state, DetailView):
            self._sync_query()
        log.info("session_opened", location=location, state=self._describe(self._state))

        self._start_primary()
        await asyncio.gather(*(self._load_facets(mode) for mode in EntityMode))

    def navigate(self, location: str) -> None:
        """Follow a location change (address bar, history, or a link)."""
        route, query = Route.parse(location)
        if not route.slug:
            filters = FILTERS_BY_MODE[route.mode].from_query_params(query)
            if filters != self._filters[route.mode]:
                self._filters[route.mode] = filters  # type: ignore[assignment]
                self._search[route.mode].reset(filters.search)
                self._pagination[route.mode].reset()
        self._transition(on_route_change(self._state, route))

    async def idle(self) -> None:
        """Wait until no primary fetch is in flight.

        Re-raises unexpected errors from a finished fetch.
        """
        while pending := [task for task in self._tasks.values() if not task.done()]:
            await asyncio.wait(pending)
        for surface, task in list(self._tasks.items()):
            del self._tasks[surface]
            if not task.cancelled() and (error := task.exception()) is not None:
                raise error

    async def close(self) -> None:
        """Unmount: cancel timers and in-flight work; late results are dropped."""
        self._alive = False
        for debouncer in self._search.values():
            debouncer.close()
        for prefetcher in self._prefetchers.values():
            prefetcher.cancel()
        tasks = [task for task in self._tasks.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)
        self._tasks.clear()
        log.info("session_closed")

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def state(self) -> BrowseState:
        return self._state

    @property
    def mode(self) -> EntityMode:
        return self._state.mode

    @property
    def location(self) -> str:
        """Path plus query. The query is frozen while a detail view is showing."""
        return route_for(self._state).with_query(self._query)

    @property
    def filters(self) -> ActiveFilters:
        """Settled filters of the mode the filter controls currently act on."""
        return self._filters[self._filter_mode()]

    def filters_for(self, mode: EntityMode) -> ActiveFilters:
        return self._filters[mode]

    @property
    def search_input(self) -> str:
        """Raw search text, ahead of the debounced value during a burst."""
        return self._search[self._filter_mode()].latest

    @property
    def items(self) -> list[Any]:
        return list(self._items[self.mode])

    @property
    def filtered_items(self) -> list[Any]:
        return apply_filters(self._items[self.mode], self._filters[self.mode])

    @property
    def pagination(self) -> PaginationController:
        return self._pagination[self.mode]

    @property
    def facets(self) -> PeopleFacets | ProjectFacets:
        return self._facets[self.mode]

    @property
    def error(self) -> str | None:
        return self._errors[self.mode]

    def error_for(self, mode: EntityMode) -> str | None:
        return self._errors[mode]

    def facet_error_for(self, mode: EntityMode) -> str | None:
        return self._facet_errors[mode]

    @property
    def detail(self) -> Profile | Project | None:
        """The displayed record; None unless the detail state is READY."""
        return self._detail

    @property
    def detail_status(self) -> DetailStatus | None:
        return self._state.status if isinstance(self._state, DetailView) else None

    @property
    def navigator(self) -> SequentialNavigator:
        return self._navigator

    @property
    def person_projects(self) -> list[ProjectSummary]:
        """Displayed person's projects under the current project filters."""
        profile = self._detail if isinstance(self._detail, Profile) else None
        project_filters = self._filters[EntityMode.PROJECTS]
        return filter_person_projects(profile, project_filters)  # type: ignore[arg-type]

    @property
    def carousel(self) -> ProjectCarousel:
        return self._carousel

    @property
    def visible_projects(self) -> list[ProjectSummary]:
        return self._carousel.visible(self.person_projects)

    def view_hint(self, viewport_width: int) -> ViewHint:
        return view_hint(
            self._state,
            len(self._items[self.mode]),
            viewport_width,
            min_width=self.settings.scroll_lock_min_width,
            full_page=self.settings.grid_page_size,
        )

    # =========================================================================
    # Filters
    # =========================================================================

    def set_search(self, text: str) -> None:
        """Type into the search box; the filter follows after the debounce delay."""
        self._search[self._filter_mode()].push(text)

    def toggle_facet(self, facet: str, value: str) -> None:
        mode = self._filter_mode()
        self._filters[mode] = self._filters[mode].toggle(facet, value)
        self._filters_changed(mode)

    def set_open_to_work(self, flag: bool) -> None:
        mode = self._filter_mode()
        filters = self._filters[mode]
        if not isinstance(filters, PeopleFilters):
            raise ValidationError(
                "open-to-work only applies to people", details={"mode": mode.value}
            )
        if filters.open_to_work != flag:
            self._filters[mode] = filters.with_open_to_work(flag)
            self._filters_changed(mode)

    def clear_filters(self) -> None:
        mode = self._filter_mode()
        self._search[mode].reset("")
        self._filters[mode] = self._filters[mode].cleared()
        self._filters_changed(mode)

    def _filter_mode(self) -> EntityMode:
        """Mode whose filters the controls edit.

        A person's detail page filters that person's projects, so it edits
        the project filters.
        """
        state = self._state
        if isinstance(state, DetailView) and state.mode is EntityMode.PEOPLE:
            return EntityMode.PROJECTS
        return state.mode

    def _on_search_settled(self, mode: EntityMode, text: str) -> None:
        if not self._alive:
            return
        self._filters[mode] = self._filters[mode].with_search(text)
        self._filters_changed(mode)

    def _filters_changed(self, mode: EntityMode) -> None:
        query = str(self._filters[mode].to_query_params())
        log.debug("filters_changed", mode=mode.value, query=query)
        if isinstance(self._state, DetailView):
            self._carousel.sync(self.person_projects)
            return
        if mode is not self._state.mode:
            return
        self._pagination[mode].reset()
        self._sync_query()
        self._start_primary()

    # =========================================================================
    # Navigation
    # =========================================================================

    def set_layout(self, layout: LayoutMode) -> None:
        """Layout toggle. Detail without a selection opens the first filtered item."""
        filtered = self.filtered_items
        first = filtered[0].slug if filtered else None
        self._transition(toggle_layout(self._state, layout, first))

    def switch_tab(self, mode: EntityMode) -> None:
        """Show the grid of ``mode`` from its first page; the detail position is dropped."""
        self._navigator.reset()
        pager = self._pagination[mode]
        moved = pager.page != 0
        pager.reset()
        new_state = transitions.switch_tab(self._state, mode)
        if new_state == self._state:
            if moved:
                self._start_primary()
            return
        self._transition(new_state)

    def select(self, slug: str) -> None:
        """Open the detail view for ``slug``."""
        self._transition(transitions.select(self._state, slug))

    def back(self) -> None:
        self._transition(transitions.back(self._state))

    def next_item(self) -> bool:
        return self._step("next", self._navigator.next_slug)

    def previous_item(self) -> bool:
        return self._step("previous", self._navigator.previous_slug)

    def _step(self, direction: str, slug: str | None) -> bool:
        state = self._state
        if not isinstance(state, DetailView) or slug is None:
            return False
        log.info(
            "detail_navigation",
            mode=state.mode.value,
            direction=direction,
            from_slug=state.slug,
            to_slug=slug,
        )
        self._navigator.sync(self._navigator.slugs, slug)
        self._transition(transitions.select(state, slug))
        return True

    def next_page(self) -> bool:
        if isinstance(self._state, DetailView) or not self.pagination.next():
            return False
        self._start_primary()
        return True

    def previous_page(self) -> bool:
        if isinstance(self._state, DetailView) or not self.pagination.previous():
            return False
        self._start_primary()
        return True

    def go_to_page(self, page: int) -> bool:
        """Jump to a zero-based page, clamped to the known total."""
        if isinstance(self._state, DetailView) or not self.pagination.go_to(page):
            return False
        self._start_primary()
        return True

    def handle_key(self, key: str) -> bool:
        """ArrowLeft/ArrowRight: page in grid and list, step in detail.

        Returns True when the key caused a move.
        """
        in_detail = isinstance(self._state, DetailView)
        match key:
            case "ArrowRight":
                return self.next_item() if in_detail else self.next_page()
            case "ArrowLeft":
                return self.previous_item() if in_detail else self.previous_page()
            case _:
                return False

    def refresh(self) -> None:
        """Reload the current surface."""
        self._start_primary()

    def _transition(self, new_state: BrowseState) -> None:
        previous = self._state
        if new_state == previous:
            return
        self._state = new_state
        if self._detail is not None:
            # Never show the previous record while the next one loads
            self._detail = None
            self._carousel.sync(self.person_projects)
        if not isinstance(new_state, DetailView):
            self._sync_query()
        log.debug(
            "state_changed",
            from_state=self._describe(previous),
            to_state=self._describe(new_state),
        )
        self._start_primary()

    def _sync_query(self) -> None:
        self._query = self._filters[self._state.mode].to_query_params()

    @staticmethod
    def _describe(state: BrowseState) -> str:
        if isinstance(state, DetailView):
            return f"{state.mode.value}/{state.slug}:{state.status.value}"
        return f"{state.mode.value}:{state.layout.value}"

    # =========================================================================
    # Fetching
    # =========================================================================

    def _start_primary(self) -> None:
        if not self._alive:
            return
        state = self._state
        if isinstance(state, DetailView):
            self._run_primary("detail", partial(self._load_detail, state))
        else:
            self._cancel_surface("detail")
            self._run_primary("browse", partial(self._load_browse, state))

    def _run_primary(
        self, surface: Surface, load: Callable[[int], Coroutine[Any, Any, None]]
    ) -> None:
        """Start a primary fetch, superseding whatever that surface had in flight."""
        self._cancel_surface(surface)
        generation = self._generation[surface]
        self._tasks[surface] = asyncio.get_running_loop().create_task(load(generation))

    def _cancel_surface(self, surface: Surface) -> None:
        self._generation[surface] += 1
        task = self._tasks.get(surface)
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _is_current(self, surface: Surface, generation: int) -> bool:
        return self._alive and self._generation[surface] == generation

    async def _load_browse(self, state: GridView | ListView, generation: int) -> None:
        mode = state.mode
        pager = self._pagination[mode]
        page_size = (
            self.settings.list_page_size
            if isinstance(state, ListView)
            else self.settings.grid_page_size
        )
        pager.resize(page_size)
        filters = self._filters[mode]
        requested = pager.page

        self.progress.start()
        try:
            result = await self._sources[mode].list_page(filters, requested, pager.page_size)
        except FetchError as e:
            if self._is_current("browse", generation):
                self._errors[mode] = _failure_message(mode)
                self.progress.complete()
                log.warning("browse_load_failed", mode=mode.value, page=requested, error=str(e))
            return

        if not self._is_current("browse", generation):
            log.debug("stale_result_dropped", surface="browse", mode=mode.value)
            return

        self.progress.advance(60)
        pager.reconcile(result.total)
        if pager.page != requested:
            # The total shrank under the requested page; load the last page instead
            log.debug("page_clamped", mode=mode.value, requested=requested, page=pager.page)
            self._run_primary("browse", partial(self._load_browse, state))
            return

        self._items[mode] = list(result.items)
        self._errors[mode] = None
        self.progress.complete()
        log.debug(
            "browse_loaded",
            mode=mode.value,
            layout=state.layout.value,
            page=pager.page,
            count=len(result.items),
            total=pager.total,
        )

    async def _load_detail(self, state: DetailView, generation: int) -> None:
        mode = state.mode
        source = self._sources[mode]
        self._detail = None
        self._prefetchers[mode].cancel()
        if self._navigator_mode is not mode:
            self._navigator = SequentialNavigator()
            self._navigator_mode = mode

        self.progress.start()
        record, listing = await asyncio.gather(
            source.get_by_slug(state.slug),
            source.list_page(default_filters(mode), 0, self.settings.detail_list_limit),
            return_exceptions=True,
        )
        if not self._is_current("detail", generation):
            log.debug("stale_result_dropped", surface="detail", slug=state.slug)
            return
        self.progress.advance(60)

        for outcome in (record, listing):
            if isinstance(outcome, BaseException) and not isinstance(outcome, FetchError):
                raise outcome

        if isinstance(record, FetchError):
            status = DetailStatus.FAILED
            log.warning("detail_load_failed", mode=mode.value, slug=state.slug, error=str(record))
        elif record is None:
            status = DetailStatus.NOT_FOUND
            log.info("detail_not_found", mode=mode.value, slug=state.slug)
        else:
            status = DetailStatus.READY
            self._detail = record

        self._state = resolve_detail(self._state, status)
        self._carousel.sync(self.person_projects)

        if isinstance(listing, FetchError):
            log.warning("detail_list_failed", mode=mode.value, error=str(listing))
        else:
            self._navigator.sync([item.slug for item in listing.items], state.slug)

        self.progress.complete()

        if status is DetailStatus.READY:
            self._log_view(record)
            self._prefetchers[mode].schedule(self._navigator.neighbours())

    async def _load_facets(self, mode: EntityMode) -> None:
        try:
            facets = await self._sources[mode].list_filter_options()
        except FetchError as e:
            if self._alive:
                self._facet_errors[mode] = f"Failed to load {mode.value} filters."
                log.warning("facets_load_failed", mode=mode.value, error=str(e))
            return
        if self._alive:
            self._facets[mode] = facets
            self._facet_errors[mode] = None

    @staticmethod
    def _log_view(record: Any) -> None:
        if isinstance(record, Profile):
            log.info("profile_viewed", slug=record.slug, name=record.name)
        elif isinstance(record, Project):
            log.info("project_viewed", slug=record.slug, title=record.title)
