"""Project filters applied to the projects embedded in a profile."""

from __future__ import annotations

from collections.abc import Sequence

from lookbook.browse.filters import ProjectFilters, apply_filters
from lookbook.models.entities import Profile, ProjectSummary


def filter_person_projects(
    profile: Profile | None, filters: ProjectFilters
) -> list[ProjectSummary]:
    """The person's projects that pass the active project filters.

    Without any project search or facet selected the embedded list comes
    back as is; exclusion only starts once a constraint exists.
    """
    if profile is None:
        return []
    if not filters.has_constraints:
        return list(profile.projects)
    return apply_filters(profile.projects, filters)


class ProjectCarousel:
    """Fixed-size window stepping through a person's filtered projects."""

    def __init__(self, size: int = 3) -> None:
        if size < 1:
            raise ValueError(f"carousel size must be positive, got {size}")
        self.size = size
        self.start = 0
        self._slugs: tuple[str, ...] = ()

    def sync(self, projects: Sequence[ProjectSummary]) -> None:
        """Restart at the first window whenever the project list changes."""
        slugs = tuple(project.slug for project in projects)
        if slugs != self._slugs:
            self._slugs = slugs
            self.start = 0

    @property
    def last_start(self) -> int:
        if not self._slugs:
            return 0
        return ((len(self._slugs) - 1) // self.size) * self.size

    @property
    def can_previous(self) -> bool:
        return self.start > 0

    @property
    def can_next(self) -> bool:
        return self.start < self.last_start

    def next(self) -> None:
        self.start = min(self.last_start, self.start + self.size)

    def previous(self) -> None:
        self.start = max(0, self.start - self.size)

    def visible[T](self, projects: Sequence[T]) -> list[T]:
        return list(projects[self.start : self.start + self.size])
