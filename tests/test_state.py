"""Tests for the browse/navigate state machine."""

import pytest

from lookbook.browse.state import (
    DetailStatus,
    DetailView,
    GridView,
    ListView,
    Route,
    back,
    initial_state,
    on_route_change,
    resolve_detail,
    route_for,
    select,
    switch_tab,
    toggle_layout,
    view_hint,
)
from lookbook.errors import InvalidTransitionError, ValidationError
from lookbook.models.entities import EntityMode, LayoutMode

PEOPLE = EntityMode.PEOPLE
PROJECTS = EntityMode.PROJECTS


class TestRoute:
    """Parsing locations into route plus query."""

    def test_collection_route(self) -> None:
        route, query = Route.parse("/projects?skills=Go&skills=Rust")
        assert route == Route(PROJECTS)
        assert query.get_list("skills") == ["Go", "Rust"]

    def test_detail_route(self) -> None:
        route, _ = Route.parse("/people/ada-lovelace")
        assert route == Route(PEOPLE, "ada-lovelace")

    def test_unknown_prefix_browses_people(self) -> None:
        route, _ = Route.parse("/somewhere/else")
        assert route == Route(PEOPLE)

    def test_root_browses_people(self) -> None:
        assert Route.parse("/")[0] == Route(PEOPLE)

    def test_path_and_query(self) -> None:
        route, query = Route.parse("/people?search=ada")
        assert route.with_query(query) == "/people?search=ada"
        assert Route(PROJECTS, "alpha").with_query(None) == "/projects/alpha"


class TestTransitions:
    """Pure state transitions."""

    def test_slug_forces_detail(self) -> None:
        state = initial_state(Route(PEOPLE, "ada"))
        assert state == DetailView(PEOPLE, "ada")
        assert state.status is DetailStatus.LOADING

    def test_no_slug_forces_grid(self) -> None:
        assert initial_state(Route(PROJECTS)) == GridView(PROJECTS)

    def test_detail_requires_slug(self) -> None:
        with pytest.raises(ValidationError):
            DetailView(PEOPLE, "")

    def test_select_remembers_origin(self) -> None:
        state = select(ListView(PEOPLE), "ada")
        assert state.origin == ListView(PEOPLE)
        assert back(state) == ListView(PEOPLE)

    def test_back_from_direct_detail_goes_to_grid(self) -> None:
        assert back(DetailView(PROJECTS, "alpha")) == GridView(PROJECTS)

    def test_sequential_select_keeps_origin(self) -> None:
        first = select(ListView(PEOPLE), "ada")
        second = select(first, "bo")
        assert second.origin == ListView(PEOPLE)

    def test_route_change_resets_to_loading(self) -> None:
        ready = resolve_detail(DetailView(PEOPLE, "ada"), DetailStatus.READY)
        moved = on_route_change(ready, Route(PEOPLE, "bo"))
        assert moved == DetailView(PEOPLE, "bo")
        assert moved.status is DetailStatus.LOADING

    def test_route_change_across_modes_drops_origin(self) -> None:
        state = select(ListView(PEOPLE), "ada")
        moved = on_route_change(state, Route(PROJECTS, "alpha"))
        assert moved.origin is None

    def test_route_without_slug_is_grid(self) -> None:
        assert on_route_change(DetailView(PEOPLE, "ada"), Route(PEOPLE)) == GridView(PEOPLE)

    def test_toggle_to_list(self) -> None:
        assert toggle_layout(GridView(PEOPLE), LayoutMode.LIST) == ListView(PEOPLE)

    def test_toggle_to_detail_opens_first_item(self) -> None:
        state = toggle_layout(GridView(PEOPLE), LayoutMode.DETAIL, "ada")
        assert state == DetailView(PEOPLE, "ada", origin=GridView(PEOPLE))

    def test_toggle_to_detail_without_items_is_noop(self) -> None:
        assert toggle_layout(GridView(PEOPLE), LayoutMode.DETAIL, None) == GridView(PEOPLE)

    def test_switch_tab_lands_on_grid(self) -> None:
        assert switch_tab(DetailView(PEOPLE, "ada"), PROJECTS) == GridView(PROJECTS)

    def test_resolve_outside_detail_raises(self) -> None:
        with pytest.raises(InvalidTransitionError):
            resolve_detail(GridView(PEOPLE), DetailStatus.READY)

    def test_route_for(self) -> None:
        assert route_for(DetailView(PROJECTS, "alpha")).path == "/projects/alpha"
        assert route_for(ListView(PEOPLE)).path == "/people"


class TestViewHint:
    """Scroll lock for a full 4x2 grid on wide screens."""

    def test_locks_full_grid_on_wide_viewport(self) -> None:
        assert view_hint(GridView(PEOPLE), 8, 1536).lock_scroll

    def test_narrow_viewport_does_not_lock(self) -> None:
        assert not view_hint(GridView(PEOPLE), 8, 1535).lock_scroll

    def test_partial_page_does_not_lock(self) -> None:
        assert not view_hint(GridView(PEOPLE), 7, 1920).lock_scroll

    def test_list_never_locks(self) -> None:
        assert not view_hint(ListView(PEOPLE), 8, 1920).lock_scroll
