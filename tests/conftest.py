"""Shared fixtures: sample records, in-memory sources and a browse session."""

from collections.abc import Iterator

import pytest
import structlog
from factories import InMemorySource, make_profile, make_project

from lookbook.browse.session import BrowseSession
from lookbook.config import BrowseSettings
from lookbook.models.entities import (
    EntityMode,
    PeopleFacets,
    Profile,
    Project,
    ProjectFacets,
)


def _summary(slug: str, title: str, skills: list[str], sectors: list[str]) -> dict[str, object]:
    return {"slug": slug, "title": title, "skills": skills, "sectors": sectors}


@pytest.fixture
def people_records() -> list[Profile]:
    ada = make_profile(
        "ada",
        "Ada Lovelace",
        skills=["Python", "Go"],
        industries=["Fintech"],
        open_to_work=True,
        projects=[
            _summary("engine", "Analytical Engine", ["Go"], ["Research"]),
            _summary("notes", "Notes", ["Writing"], ["Education"]),
            _summary("loom", "Loom Cards", ["Go", "Python"], ["Textiles"]),
            _summary("bernoulli", "Bernoulli", ["Math"], ["Research"]),
            _summary("poetry", "Poetical Science", ["Writing"], ["Arts"]),
        ],
    )
    others = [
        make_profile(
            f"person-{i}",
            f"Person {i}",
            skills=["Rust"] if i % 2 else ["Python"],
            industries=["Health"],
        )
        for i in range(1, 10)
    ]
    return [ada, *others]


@pytest.fixture
def project_records() -> list[Project]:
    return [
        make_project("alpha", "Alpha", skills=["Go"], sectors=["Fintech"]),
        make_project("beta", "Beta", skills=["Rust", "Go"], sectors=["Health"]),
        make_project("gamma", "Gamma", skills=["Python"], sectors=["Fintech"]),
    ]


@pytest.fixture
def people_source(people_records: list[Profile]) -> InMemorySource:
    return InMemorySource(
        EntityMode.PEOPLE,
        people_records,
        facets=PeopleFacets(skills=("Go", "Python", "Rust"), industries=("Fintech", "Health")),
    )


@pytest.fixture
def projects_source(project_records: list[Project]) -> InMemorySource:
    return InMemorySource(
        EntityMode.PROJECTS,
        project_records,
        facets=ProjectFacets(skills=("Go", "Python", "Rust"), sectors=("Fintech", "Health")),
    )


@pytest.fixture
def browse_settings() -> BrowseSettings:
    return BrowseSettings(search_debounce=0.0, prefetch_delay=0.0)


@pytest.fixture
def session(
    people_source: InMemorySource,
    projects_source: InMemorySource,
    browse_settings: BrowseSettings,
) -> BrowseSession:
    return BrowseSession(people_source, projects_source, browse_settings)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo any structlog configuration a CLI invocation installed."""
    yield
    structlog.reset_defaults()
