"""Data sources the browse session reads from.

A source serves one entity type: server-side filtered pages, the filter
vocabulary, and single records by slug. The HTTP adapters wrap
``LookbookClient``; tests plug in in-memory sources with the same shape.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from lookbook.browse.filters import FacetFilters, PeopleFilters, ProjectFilters
from lookbook.client import LookbookClient
from lookbook.errors import EntityNotFoundError
from lookbook.models.entities import (
    EntityMode,
    Page,
    PeopleFacets,
    Profile,
    Project,
    ProjectFacets,
)


@runtime_checkable
class EntitySource(Protocol):
    """Read access to one entity collection."""

    mode: EntityMode

    async def list_page(self, filters: FacetFilters, page: int, page_size: int) -> Page[Any]:
        """One zero-based page of records matching ``filters``, plus the total."""
        ...

    async def list_filter_options(self) -> PeopleFacets | ProjectFacets:
        """Facet vocabulary for the filter panel."""
        ...

    async def get_by_slug(self, slug: str) -> Profile | Project | None:
        """The record for ``slug``, or None if it does not exist."""
        ...


class ProfileSource:
    mode = EntityMode.PEOPLE

    def __init__(self, client: LookbookClient) -> None:
        self._client = client

    async def list_page(
        self, filters: PeopleFilters, page: int, page_size: int
    ) -> Page[Profile]:
        return await self._client.list_profiles(
            filters=filters, limit=page_size, offset=page * page_size
        )

    async def list_filter_options(self) -> PeopleFacets:
        return await self._client.profile_filters()

    async def get_by_slug(self, slug: str) -> Profile | None:
        try:
            return await self._client.get_profile(slug)
        except EntityNotFoundError:
            return None


class ProjectSource:
    mode = EntityMode.PROJECTS

    def __init__(self, client: LookbookClient) -> None:
        self._client = client

    async def list_page(
        self, filters: ProjectFilters, page: int, page_size: int
    ) -> Page[Project]:
        return await self._client.list_projects(
            filters=filters, limit=page_size, offset=page * page_size
        )

    async def list_filter_options(self) -> ProjectFacets:
        return await self._client.project_filters()

    async def get_by_slug(self, slug: str) -> Project | None:
        try:
            return await self._client.get_project(slug)
        except EntityNotFoundError:
            return None


def http_sources(client: LookbookClient) -> dict[EntityMode, EntitySource]:
    """Both HTTP-backed sources sharing one client (and its slug cache)."""
    return {
        EntityMode.PEOPLE: ProfileSource(client),
        EntityMode.PROJECTS: ProjectSource(client),
    }
