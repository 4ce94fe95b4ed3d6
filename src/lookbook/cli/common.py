"""Shared CLI utilities: colors, console, helpers."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import TYPE_CHECKING

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from lookbook.logging.colors import AMBER, PURSUIT_BLUE, ROSE, SKY, SOFT_INDIGO

if TYPE_CHECKING:
    from lookbook.client import LookbookClientError

# Styled output only; JSON goes through print_json
console = Console()


def print_json(data: object) -> None:
    """Print JSON to stdout without Rich formatting.

    Rich wraps long lines at terminal width, which breaks JSON parsing.
    """
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def pagination_hint(first: int, last: int, total: int, page: int, page_count: int) -> None:
    """Print paging info to stderr so it never mixes with JSON output.

        Showing 9-16 of 40 (page 2/5, --page 3 for more)
    """
    if total == 0:
        return
    msg = f"Showing {first}-{last} of {total} (page {page + 1}/{max(page_count, 1)}"
    if page + 1 < page_count:
        msg += f", --page {page + 2} for more"
    print(msg + ")", file=sys.stderr)


def error(message: str) -> None:
    console.print(f"[{ROSE}]✗[/{ROSE}] {message}")


def warn(message: str) -> None:
    console.print(f"[{AMBER}]![/{AMBER}] {message}")


def info(message: str) -> None:
    console.print(f"[{SKY}]→[/{SKY}] {message}")


def create_table(title: str | None = None, *columns: str) -> Table:
    """Create a styled table; just a header underline, no heavy frames."""
    table = Table(title=title, box=box.SIMPLE_HEAD, header_style=f"bold {PURSUIT_BLUE}")
    for i, col in enumerate(columns):
        table.add_column(col, style=SOFT_INDIGO if i == 0 else None)
    return table


def create_panel(content: str, title: str | None = None, subtitle: str | None = None) -> Panel:
    return Panel(
        content,
        title=f"[{SOFT_INDIGO}]{title}[/{SOFT_INDIGO}]" if title else None,
        subtitle=subtitle,
        border_style=PURSUIT_BLUE,
    )


def spinner() -> Progress:
    return Progress(
        SpinnerColumn(style=PURSUIT_BLUE),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


@contextmanager
def loading(description: str, *, quiet: bool = False) -> Iterator[None]:
    """Spinner while a command waits on the API; silent for JSON or a non-terminal."""
    if quiet or not console.is_terminal:
        yield
        return
    with spinner() as progress:
        progress.add_task(description, total=None)
        yield


def run_async[**P, R](func: Callable[P, Awaitable[R]]) -> Callable[P, R]:
    """Decorator to run async functions in sync context (for Typer commands)."""

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        async def coro() -> R:
            return await func(*args, **kwargs)

        return asyncio.run(coro())

    return wrapper


def tags(values: list[str] | tuple[str, ...], limit: int = 4) -> str:
    """Comma-joined tag list with a "+N" overflow marker."""
    shown = ", ".join(values[:limit])
    if len(values) > limit:
        shown += f" +{len(values) - limit}"
    return shown


def truncate(text: str | None, max_length: int = 50) -> str:
    """Truncate text with ellipsis if too long."""
    text = text or ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def handle_client_error(e: LookbookClientError) -> None:
    """Report a client error and exit with code 1."""
    if "Cannot connect" in str(e):
        error(str(e))
        info("Set LOOKBOOK_API_URL to point at a running Lookbook API")
    elif e.status_code == 400:
        error(f"Invalid request: {e.detail}")
    else:
        error(str(e))
    raise typer.Exit(1)
