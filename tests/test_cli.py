"""Tests for the lookbook CLI."""

import json
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from lookbook.cache import LRUCache
from lookbook.cli.main import app
from lookbook.client import LookbookClient

runner = CliRunner()

PROFILES = [
    {
        "slug": f"person-{i}",
        "name": f"Person Number{i}",
        "skills": ["Python"] if i % 2 else ["Rust"],
        "industries": ["Health"],
        "open_to_work": i == 3,
    }
    for i in range(10)
]
ADA = {
    "slug": "ada",
    "name": "Ada Lovelace",
    "skills": ["Go"],
    "projects": [
        {"slug": "engine", "title": "Analytical Engine", "skills": ["Go"]},
        {"slug": "notes", "title": "Notes", "skills": ["Writing"]},
    ],
}
PROJECTS = [{"slug": "alpha", "title": "Alpha", "sectors": ["Fintech"]}]


class FakeApi:
    """Minimal Lookbook API served through httpx.MockTransport."""

    def __init__(self, *, down: bool = False) -> None:
        self.down = down
        self.broken: set[str] = set()
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.path in self.broken:
            return httpx.Response(500, json={"success": False, "error": "boom"})

        path = request.url.path.removeprefix("/api")
        params = request.url.params
        match path.strip("/").split("/"):
            case ["profiles", "filters"]:
                return self._ok({"skills": ["Go", "Python", "Rust"], "industries": ["Health"]})
            case ["projects", "filters"]:
                return self._ok({"skills": [], "sectors": ["Fintech"]})
            case ["profiles"]:
                records = [ADA, *PROFILES]
                if skills := params.get_list("skills"):
                    records = [r for r in records if set(skills) & set(r["skills"])]
                return self._page(records, params)
            case ["projects"]:
                return self._page(PROJECTS, params)
            case ["profiles", slug]:
                return self._one([ADA, *PROFILES], slug)
            case ["projects", slug]:
                return self._one(PROJECTS, slug)
        return httpx.Response(404)

    @staticmethod
    def _ok(data: Any, **extra: Any) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": data, **extra})

    def _page(self, records: list[dict[str, Any]], params: httpx.QueryParams) -> httpx.Response:
        offset = int(params.get("offset", 0))
        limit = int(params.get("limit", 100))
        return self._ok(records[offset : offset + limit], pagination={"total": len(records)})

    def _one(self, records: list[dict[str, Any]], slug: str) -> httpx.Response:
        for record in records:
            if record["slug"] == slug:
                return self._ok(record)
        return httpx.Response(404, json={"success": False, "error": "not found"})


@pytest.fixture
def api(monkeypatch: pytest.MonkeyPatch) -> FakeApi:
    fake = FakeApi()

    def client_factory(base_url: str | None = None) -> LookbookClient:
        return LookbookClient(
            "http://lookbook.test/api",
            cache=LRUCache(maxsize=10),
            transport=httpx.MockTransport(fake),
        )

    monkeypatch.setattr("lookbook.cli.main.get_client", client_factory)
    return fake


class TestBrowseCommands:
    """people / projects."""

    def test_people_table(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["people"])
        assert result.exit_code == 0, result.output
        assert "Ada L." in result.stdout
        assert "person-7" not in result.stdout
        assert "Showing 1-8 of 11 (page 1/2, --page 2 for more)" in result.stderr

    def test_people_json_second_page(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["people", "--page", "2", "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["page"] == 2
        assert data["page_count"] == 2
        assert data["total"] == 11
        assert [item["slug"] for item in data["items"]] == ["person-7", "person-8", "person-9"]

    def test_filters_reach_the_api(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["people", "--skill", "Go", "--skill", "Python", "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["location"] == "/people?skills=Go&skills=Python"
        listing = next(r for r in api.requests if r.url.path == "/api/profiles")
        assert listing.url.params.get_list("skills") == ["Go", "Python"]

    def test_list_layout_fetches_long_page(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["people", "--list", "--json"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)["items"]) == 11

    def test_projects_json(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["projects", "--json"])
        assert result.exit_code == 0, result.output
        assert [item["slug"] for item in json.loads(result.stdout)["items"]] == ["alpha"]

    def test_json_stays_clean_when_warnings_are_logged(self, api: FakeApi) -> None:
        api.broken.add("/api/profiles/filters")
        result = runner.invoke(app, ["people", "--json"])
        assert result.exit_code == 0, result.output

        assert json.loads(result.stdout)["total"] == 11
        assert "facets_load_failed" in result.stderr

    def test_api_down_exits_with_error(self, api: FakeApi) -> None:
        api.down = True
        result = runner.invoke(app, ["people"])
        assert result.exit_code == 1
        assert "Failed to load people" in result.stdout


class TestShowCommand:
    """show MODE SLUG."""

    def test_show_profile_json(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["show", "people", "ada", "--json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.stdout)
        assert data["record"]["name"] == "Ada Lovelace"
        assert data["previous"] is None
        assert data["next"] == "person-0"
        assert [p["slug"] for p in data["projects"]] == ["engine", "notes"]

    def test_show_profile_with_project_filter(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["show", "people", "ada", "--project-skill", "Go", "--json"])
        assert result.exit_code == 0, result.output
        assert [p["slug"] for p in json.loads(result.stdout)["projects"]] == ["engine"]

    def test_show_project_panel(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["show", "projects", "alpha"])
        assert result.exit_code == 0, result.output
        assert "Alpha" in result.stdout
        assert "Fintech" in result.stdout

    def test_show_missing_slug(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["show", "people", "ghost"])
        assert result.exit_code == 1
        assert "Profile not found: ghost" in result.stdout


class TestMiscCommands:
    def test_filters_json(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["filters", "projects", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"skills": [], "sectors": ["Fintech"]}

    def test_filters_api_down(self, api: FakeApi) -> None:
        api.down = True
        result = runner.invoke(app, ["filters", "people"])
        assert result.exit_code == 1
        assert "Cannot connect" in result.stdout

    def test_version(self, api: FakeApi) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert result.stdout.startswith("lookbook ")

    def test_verbose_enables_debug_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict[str, Any]] = []
        monkeypatch.setattr("lookbook.cli.main.configure_logging", lambda **kw: calls.append(kw))

        runner.invoke(app, ["-v", "version"])

        assert calls == [{"service_name": "cli", "level": "DEBUG"}]
