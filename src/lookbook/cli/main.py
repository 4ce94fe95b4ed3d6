"""Main CLI application.

Every command drives a ``BrowseSession`` over the HTTP sources, so the
terminal sees exactly what the browsing engine would show.
"""

from dataclasses import replace
from typing import Annotated, Any

import typer

from lookbook._version import __version__
from lookbook.browse.filters import PeopleFilters, ProjectFilters
from lookbook.browse.session import BrowseSession
from lookbook.browse.state import DetailStatus, Route
from lookbook.cli.common import (
    console,
    create_panel,
    create_table,
    error,
    handle_client_error,
    info,
    loading,
    pagination_hint,
    print_json,
    run_async,
    tags,
    truncate,
    warn,
)
from lookbook.client import LookbookClient, LookbookClientError, get_client
from lookbook.config import settings
from lookbook.logging import configure_logging
from lookbook.logging.colors import AMBER, MINT, SKY
from lookbook.models.entities import (
    EntityMode,
    LayoutMode,
    Profile,
    Project,
    ProjectSummary,
    initials,
    short_name,
)
from lookbook.sources import http_sources

app = typer.Typer(
    name="lookbook",
    help="Lookbook - browse the people and project directory",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log engine events to stderr")
    ] = False,
) -> None:
    """Lookbook CLI - talks to the API at LOOKBOOK_API_URL."""
    configure_logging(service_name="cli", level="DEBUG" if verbose else "WARNING")


def _session(client: LookbookClient) -> BrowseSession:
    sources = http_sources(client)
    # No keystrokes to wait out in a one-shot command
    browse = replace(settings.browse_settings(), search_debounce=0.0)
    return BrowseSession(sources[EntityMode.PEOPLE], sources[EntityMode.PROJECTS], browse)


# ============================================================================
# Rendering
# ============================================================================


def _people_table(records: list[Profile]) -> None:
    table = create_table(None, "Name", "Slug", "Title", "Skills", "Industries", "Open")
    for p in records:
        table.add_row(
            short_name(p.name),
            p.slug,
            truncate(p.title, 30),
            tags(p.skills),
            tags(p.industry_expertise, 2),
            f"[{MINT}]yes[/{MINT}]" if p.open_to_work else "",
        )
    console.print(table)


def _projects_table(
    records: list[Project] | list[ProjectSummary], title: str | None = None
) -> None:
    table = create_table(title, "Title", "Slug", "Summary", "Skills", "Sectors")
    for p in records:
        table.add_row(
            p.title,
            p.slug,
            truncate(p.summary or p.short_description, 40),
            tags(p.skills),
            tags(p.sectors, 2),
        )
    console.print(table)


def _profile_panel(profile: Profile) -> str:
    lines = [f"[bold]{profile.name}[/bold]  [dim]({initials(profile.name)})[/dim]"]
    if profile.title:
        lines.append(profile.title)
    if profile.open_to_work:
        lines.append(f"[{MINT}]Open to work[/{MINT}]")
    if profile.bio:
        lines.extend(["", profile.bio])
    if profile.skills:
        lines.extend(["", f"[{SKY}]Skills:[/{SKY}] {', '.join(profile.skills)}"])
    if profile.industry_expertise:
        lines.append(f"[{SKY}]Industries:[/{SKY}] {', '.join(profile.industry_expertise)}")
    for job in profile.experience:
        lines.append(f"[dim]•[/dim] {job.role} @ {job.organization}")
    return "\n".join(lines)


def _project_panel(project: Project) -> str:
    lines = [f"[bold]{project.title}[/bold]"]
    if partner := project.partner_label:
        lines.append(f"[{AMBER}]Partner:[/{AMBER}] {partner}")
    if project.summary:
        lines.extend(["", project.summary])
    if project.description:
        lines.extend(["", project.description])
    if project.skills:
        lines.extend(["", f"[{SKY}]Skills:[/{SKY}] {', '.join(project.skills)}"])
    if project.sectors:
        lines.append(f"[{SKY}]Sectors:[/{SKY}] {', '.join(project.sectors)}")
    if project.participants:
        names = ", ".join(short_name(p.name) for p in project.participants if p.name)
        lines.append(f"[{SKY}]Team:[/{SKY}] {names}")
    for video in project.demo_videos:
        lines.append(f"[dim]▶[/dim] {video.embed_url or video.url}")
    return "\n".join(lines)


# ============================================================================
# Browse commands
# ============================================================================


def _browse(
    mode: EntityMode,
    filters: PeopleFilters | ProjectFilters,
    page: int,
    list_layout: bool,
    json_output: bool,
) -> None:
    location = Route(mode).with_query(filters.to_query_params())

    @run_async
    async def run() -> None:
        async with get_client() as client:
            session = _session(client)
            try:
                with loading(f"Loading {mode.value}...", quiet=json_output):
                    await session.open(location)
                    if list_layout:
                        session.set_layout(LayoutMode.LIST)
                    await session.idle()
                    if page > 1 and session.go_to_page(page - 1):
                        await session.idle()
            finally:
                await session.close()

        if session.error:
            error(session.error)
            raise typer.Exit(1)

        records = session.filtered_items
        pager = session.pagination
        if json_output:
            print_json(
                {
                    "location": session.location,
                    "page": pager.page + 1,
                    "page_count": pager.page_count,
                    "total": pager.total,
                    "items": [r.model_dump(mode="json") for r in records],
                }
            )
            return

        if page - 1 > pager.page:
            warn(f"Only {max(pager.page_count, 1)} page(s); showing page {pager.page + 1}")
        if not records:
            info(f"No {mode.value} match these filters")
            return
        if mode is EntityMode.PEOPLE:
            _people_table(records)
        else:
            _projects_table(records)
        pagination_hint(*pager.window(len(records)), pager.total, pager.page, pager.page_count)

    run()


@app.command()
def people(
    search: Annotated[str | None, typer.Option("--search", "-s", help="Free-text search")] = None,
    skill: Annotated[
        list[str] | None, typer.Option("--skill", help="Skill facet (repeatable)")
    ] = None,
    industry: Annotated[
        list[str] | None, typer.Option("--industry", help="Industry facet (repeatable)")
    ] = None,
    open_to_work: Annotated[
        bool, typer.Option("--open-to-work", help="Only people open to work")
    ] = False,
    page: Annotated[int, typer.Option("--page", "-p", min=1, help="Page number")] = 1,
    list_layout: Annotated[bool, typer.Option("--list", help="List layout (long pages)")] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Browse people."""
    filters = PeopleFilters(
        search=search or "",
        skills=frozenset(skill or ()),
        industries=frozenset(industry or ()),
        open_to_work=open_to_work,
    )
    _browse(EntityMode.PEOPLE, filters, page, list_layout, json_output)


@app.command()
def projects(
    search: Annotated[str | None, typer.Option("--search", "-s", help="Free-text search")] = None,
    skill: Annotated[
        list[str] | None, typer.Option("--skill", help="Skill facet (repeatable)")
    ] = None,
    sector: Annotated[
        list[str] | None, typer.Option("--sector", help="Sector facet (repeatable)")
    ] = None,
    page: Annotated[int, typer.Option("--page", "-p", min=1, help="Page number")] = 1,
    list_layout: Annotated[bool, typer.Option("--list", help="List layout (long pages)")] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Browse projects."""
    filters = ProjectFilters(
        search=search or "",
        skills=frozenset(skill or ()),
        sectors=frozenset(sector or ()),
    )
    _browse(EntityMode.PROJECTS, filters, page, list_layout, json_output)


# ============================================================================
# Detail
# ============================================================================


@app.command()
def show(
    mode: Annotated[EntityMode, typer.Argument(help="people or projects")],
    slug: Annotated[str, typer.Argument(help="Profile or project slug")],
    project_search: Annotated[
        str | None, typer.Option("--project-search", help="Filter the person's projects")
    ] = None,
    project_skill: Annotated[
        list[str] | None, typer.Option("--project-skill", help="Project skill (repeatable)")
    ] = None,
    project_sector: Annotated[
        list[str] | None, typer.Option("--project-sector", help="Project sector (repeatable)")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show one profile or project with its neighbours."""

    @run_async
    async def run() -> None:
        async with get_client() as client:
            session = _session(client)
            try:
                with loading(f"Loading {slug}...", quiet=json_output):
                    await session.open(Route(mode, slug).path)
                    await session.idle()
                if session.detail_status is DetailStatus.READY and mode is EntityMode.PEOPLE:
                    if project_search:
                        session.set_search(project_search)
                    for value in project_skill or ():
                        session.toggle_facet("skills", value)
                    for value in project_sector or ():
                        session.toggle_facet("sectors", value)
            finally:
                await session.close()

        status = session.detail_status
        if status is DetailStatus.NOT_FOUND:
            error(f"{mode.entity_type} not found: {slug}")
            raise typer.Exit(1)
        if status is not DetailStatus.READY:
            error(f"Failed to load {mode.entity_type.lower()} {slug}. Please try again.")
            raise typer.Exit(1)

        record = session.detail
        navigator = session.navigator
        projects_shown = session.person_projects
        if json_output:
            payload: dict[str, Any] = {
                "record": record.model_dump(mode="json") if record else None,
                "previous": navigator.previous_slug,
                "next": navigator.next_slug,
            }
            if mode is EntityMode.PEOPLE:
                payload["projects"] = [p.model_dump(mode="json") for p in projects_shown]
            print_json(payload)
            return

        if isinstance(record, Profile):
            console.print(create_panel(_profile_panel(record), title=record.slug))
            if projects_shown:
                _projects_table(projects_shown, title="Select projects")
            elif record.projects:
                info("No projects match these filters")
        elif isinstance(record, Project):
            console.print(create_panel(_project_panel(record), title=record.slug))

        nav = []
        if navigator.previous_slug:
            nav.append(f"← {navigator.previous_slug}")
        if navigator.next_slug:
            nav.append(f"{navigator.next_slug} →")
        if nav:
            console.print(f"[dim]{'   '.join(nav)}[/dim]")

    run()


@app.command("filters")
def filters_cmd(
    mode: Annotated[EntityMode, typer.Argument(help="people or projects")],
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List the filter vocabulary for people or projects."""

    @run_async
    async def run() -> None:
        try:
            async with get_client() as client:
                facets = await http_sources(client)[mode].list_filter_options()
        except LookbookClientError as e:
            handle_client_error(e)
            return

        data = facets.model_dump(mode="json")
        if json_output:
            print_json(data)
            return
        for name, values in data.items():
            console.print(f"[bold {SKY}]{name.title()}[/bold {SKY}] ({len(values)})")
            for value in values:
                console.print(f"  {value}")

    run()


@app.command()
def version() -> None:
    """Show the installed lookbook version."""
    console.print(f"lookbook {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
