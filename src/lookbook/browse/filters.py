"""Facet filter model.

Active filters are immutable values. Each one is at the same time:

- a pure predicate over in-memory records (``include`` / ``apply_filters``),
- a set of API request parameters (``to_request_params``),
- the query half of the browse location (``to_query_params`` /
  ``from_query_params``).

Predicates are ANDed; inside a facet the rule is intersection, so a record
passes when it carries any of the selected values. An empty facet passes
everything.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, ClassVar, Self

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from lookbook.errors import ValidationError
from lookbook.models.entities import EntityMode


class FacetFilters(BaseModel):
    """Shared behaviour of people and project filters."""

    model_config = ConfigDict(frozen=True)

    mode: ClassVar[EntityMode]
    # facet name -> record attribute holding the values
    facet_fields: ClassVar[dict[str, str]]
    # record attributes searched by free text, scalar or list
    search_fields: ClassVar[tuple[str, ...]]

    search: str = ""
    skills: frozenset[str] = frozenset()

    @field_validator("search", mode="before")
    @classmethod
    def coerce_search(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def search_term(self) -> str:
        """Lower-cased search text; whitespace-only input counts as no search."""
        return self.search.strip().lower()

    @property
    def has_constraints(self) -> bool:
        """True when at least one component differs from its default."""
        return bool(self.search_term) or any(self.facet(name) for name in self.facet_fields)

    def facet(self, name: str) -> frozenset[str]:
        if name not in self.facet_fields:
            raise ValidationError(
                f"Unknown {self.mode.value} facet: {name}",
                details={"facet": name, "allowed": sorted(self.facet_fields)},
            )
        return getattr(self, name)

    # -- transitions ---------------------------------------------------------

    def with_search(self, text: str) -> Self:
        return self.model_copy(update={"search": text})

    def toggle(self, name: str, value: str) -> Self:
        """Add ``value`` to a facet, or remove it when already selected."""
        current = self.facet(name)
        updated = current - {value} if value in current else current | {value}
        return self.model_copy(update={name: updated})

    def cleared(self) -> Self:
        return type(self)()

    # -- predicate -------------------------------------------------------------

    def matches(self, record: Any) -> bool:
        """Decide whether ``record`` is included under these filters."""
        term = self.search_term
        if term and not any(term in text.lower() for text in self._search_texts(record)):
            return False

        for name, attribute in self.facet_fields.items():
            selected = self.facet(name)
            if not selected:
                continue
            values = getattr(record, attribute, None) or ()
            if selected.isdisjoint(values):
                return False

        return True

    def _search_texts(self, record: Any) -> Iterator[str]:
        for attribute in self.search_fields:
            value = getattr(record, attribute, None)
            if isinstance(value, str):
                yield value
            elif isinstance(value, (list, tuple)):
                yield from (item for item in value if isinstance(item, str))

    # -- serialization ---------------------------------------------------------

    def _param_items(self) -> list[tuple[str, str]]:
        items: list[tuple[str, str]] = []
        if self.search:
            items.append(("search", self.search))
        for name in self.facet_fields:
            items.extend((name, value) for value in sorted(self.facet(name)))
        return items

    def to_query_params(self) -> httpx.QueryParams:
        """Location query for these filters; defaults are omitted."""
        return httpx.QueryParams(self._param_items())

    def to_request_params(self) -> dict[str, Any]:
        """API list parameters; empty facets are left out entirely."""
        params: dict[str, Any] = {}
        if self.search_term:
            params["search"] = self.search.strip()
        for name in self.facet_fields:
            if values := self.facet(name):
                params[name] = sorted(values)
        return params

    @classmethod
    def from_query_params(cls, params: httpx.QueryParams | str | None) -> Self:
        """Build filters from a location query; unrelated parameters are ignored."""
        if not isinstance(params, httpx.QueryParams):
            params = httpx.QueryParams(params or "")
        values: dict[str, Any] = {"search": params.get("search", "")}
        for name in cls.facet_fields:
            values[name] = frozenset(v for v in params.get_list(name) if v)
        return cls(**values)


class PeopleFilters(FacetFilters):
    """Active filters for the people collection."""

    mode: ClassVar[EntityMode] = EntityMode.PEOPLE
    facet_fields: ClassVar[dict[str, str]] = {
        "skills": "skills",
        "industries": "industry_expertise",
    }
    search_fields: ClassVar[tuple[str, ...]] = ("name", "bio", "skills")

    industries: frozenset[str] = frozenset()
    open_to_work: bool = False

    @property
    def has_constraints(self) -> bool:
        return self.open_to_work or super().has_constraints

    def with_open_to_work(self, flag: bool) -> Self:
        return self.model_copy(update={"open_to_work": flag})

    def matches(self, record: Any) -> bool:
        if self.open_to_work and not getattr(record, "open_to_work", False):
            return False
        return super().matches(record)

    def _param_items(self) -> list[tuple[str, str]]:
        items = super()._param_items()
        if self.open_to_work:
            items.append(("openToWork", "true"))
        return items

    def to_request_params(self) -> dict[str, Any]:
        params = super().to_request_params()
        if self.open_to_work:
            params["openToWork"] = "true"
        return params

    @classmethod
    def from_query_params(cls, params: httpx.QueryParams | str | None) -> Self:
        if not isinstance(params, httpx.QueryParams):
            params = httpx.QueryParams(params or "")
        base = super().from_query_params(params)
        return base.with_open_to_work(params.get("openToWork") == "true")


class ProjectFilters(FacetFilters):
    """Active filters for the project collection and for a person's projects."""

    mode: ClassVar[EntityMode] = EntityMode.PROJECTS
    facet_fields: ClassVar[dict[str, str]] = {
        "skills": "skills",
        "sectors": "sectors",
    }
    search_fields: ClassVar[tuple[str, ...]] = ("title", "summary", "short_description", "skills")

    sectors: frozenset[str] = frozenset()


ActiveFilters = PeopleFilters | ProjectFilters

FILTERS_BY_MODE: dict[EntityMode, type[FacetFilters]] = {
    EntityMode.PEOPLE: PeopleFilters,
    EntityMode.PROJECTS: ProjectFilters,
}


def default_filters(mode: EntityMode) -> ActiveFilters:
    return FILTERS_BY_MODE[mode]()  # type: ignore[return-value]


def include(record: Any, filters: FacetFilters) -> bool:
    """Pure inclusion decision for one record."""
    return filters.matches(record)


def apply_filters[T](records: Iterable[T], filters: FacetFilters) -> list[T]:
    """Return the records ``filters`` includes, in their original order."""
    return [record for record in records if filters.matches(record)]
