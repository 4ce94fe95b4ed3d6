"""Tests for project filters applied to a person's embedded projects."""

from factories import make_profile, make_project

from lookbook.browse.cross_filter import ProjectCarousel, filter_person_projects
from lookbook.browse.filters import ProjectFilters
from lookbook.models.entities import Profile


class TestFilterPersonProjects:
    """Derived per-person project list."""

    def test_no_filters_returns_all_embedded_projects(
        self, people_records: list[Profile]
    ) -> None:
        ada = people_records[0]
        assert len(filter_person_projects(ada, ProjectFilters())) == 5

    def test_no_profile_yields_nothing(self) -> None:
        assert filter_person_projects(None, ProjectFilters(search="x")) == []

    def test_skill_filter(self, people_records: list[Profile]) -> None:
        filters = ProjectFilters(skills=frozenset({"Go"}))
        result = filter_person_projects(people_records[0], filters)
        assert [p.slug for p in result] == ["engine", "loom"]

    def test_search_filter(self, people_records: list[Profile]) -> None:
        result = filter_person_projects(people_records[0], ProjectFilters(search="poetical"))
        assert [p.slug for p in result] == ["poetry"]

    def test_sector_filter(self, people_records: list[Profile]) -> None:
        filters = ProjectFilters(sectors=frozenset({"Research"}))
        result = filter_person_projects(people_records[0], filters)
        assert [p.slug for p in result] == ["engine", "bernoulli"]

    def test_profile_is_not_modified(self, people_records: list[Profile]) -> None:
        ada = people_records[0]
        filter_person_projects(ada, ProjectFilters(search="nothing matches"))
        assert len(ada.projects) == 5

    def test_profile_without_projects(self) -> None:
        assert filter_person_projects(make_profile("lone"), ProjectFilters()) == []


class TestProjectCarousel:
    """Window of three stepping through the derived list."""

    def _projects(self, count: int) -> list:
        return [make_project(f"p{i}") for i in range(count)]

    def test_steps_by_window_size(self) -> None:
        projects = self._projects(7)
        carousel = ProjectCarousel(3)
        carousel.sync(projects)
        assert [p.slug for p in carousel.visible(projects)] == ["p0", "p1", "p2"]
        carousel.next()
        assert carousel.start == 3
        carousel.next()
        assert [p.slug for p in carousel.visible(projects)] == ["p6"]
        assert not carousel.can_next

    def test_next_is_clamped_to_last_step(self) -> None:
        projects = self._projects(5)
        carousel = ProjectCarousel(3)
        carousel.sync(projects)
        carousel.next()
        carousel.next()
        assert carousel.start == 3

    def test_previous_stops_at_start(self) -> None:
        carousel = ProjectCarousel(3)
        carousel.sync(self._projects(5))
        carousel.previous()
        assert carousel.start == 0
        assert not carousel.can_previous

    def test_changed_list_resets_position(self) -> None:
        projects = self._projects(9)
        carousel = ProjectCarousel(3)
        carousel.sync(projects)
        carousel.next()
        carousel.sync(projects[:4])
        assert carousel.start == 0

    def test_same_list_keeps_position(self) -> None:
        projects = self._projects(9)
        carousel = ProjectCarousel(3)
        carousel.sync(projects)
        carousel.next()
        carousel.sync(list(projects))
        assert carousel.start == 3

    def test_empty_list(self) -> None:
        carousel = ProjectCarousel(3)
        carousel.sync([])
        assert carousel.last_start == 0
        assert not carousel.can_next
        assert carousel.visible([]) == []
