"""HTTP client for the Lookbook API.

Read-only: profiles and projects, their filter vocabularies, and single
records by slug. Every response is wrapped as
``{"success": bool, "data": ..., "pagination": {"total": int}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
import pydantic
import structlog

from lookbook.cache import LRUCache, slug_key
from lookbook.config import settings
from lookbook.errors import EntityNotFoundError, FetchError
from lookbook.models.entities import Page, PeopleFacets, Profile, Project, ProjectFacets

if TYPE_CHECKING:
    from lookbook.browse.filters import PeopleFilters, ProjectFilters

log = structlog.get_logger()


class LookbookClientError(FetchError):
    """Error talking to the Lookbook API."""

    def __init__(self, message: str, status_code: int | None = None, detail: str | None = None):
        super().__init__(message, details={"status_code": status_code, "detail": detail})
        self.status_code = status_code
        self.detail = detail


class LookbookClient:
    """Async client for the Lookbook REST API.

    Slug lookups go through an LRU cache so neighbour prefetches pay off.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        *,
        cache: LRUCache[Profile | Project] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL, defaults to LOOKBOOK_API_URL.
            timeout: Request timeout in seconds.
            cache: Detail record cache; a fresh one is created from settings if omitted.
            transport: Custom httpx transport (tests use httpx.MockTransport).
        """
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.cache: LRUCache[Profile | Project] = cache or LRUCache(
            maxsize=settings.cache_maxsize, default_ttl=settings.cache_ttl_seconds
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> LookbookClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, path: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Make a request and return the decoded JSON envelope.

        Raises:
            LookbookClientError: On connection problems, timeouts and HTTP errors.
                A 404 keeps its status code so slug lookups can tell not-found apart.
        """
        client = await self._get_client()
        try:
            response = await client.request(method, path, params=params)
        except httpx.ConnectError as e:
            raise LookbookClientError(
                f"Cannot connect to Lookbook API at {self.base_url}. Is the server running?",
                detail=str(e),
            ) from e
        except httpx.TimeoutException as e:
            raise LookbookClientError(
                f"Request timed out after {self.timeout}s", detail=str(e)
            ) from e
        except httpx.HTTPError as e:
            raise LookbookClientError(f"Request failed: {e}", detail=str(e)) from e
        log.debug("api_request", method=method, path=path, status=response.status_code)

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = str(body.get("error")) if isinstance(body, dict) and body.get("error") else ""
            detail = detail or response.text or response.reason_phrase
            raise LookbookClientError(
                f"API error: {detail}", status_code=response.status_code, detail=detail
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise LookbookClientError("API returned invalid JSON", detail=str(e)) from e
        if not isinstance(payload, dict):
            raise LookbookClientError("API returned an unexpected payload")
        return payload

    @staticmethod
    def _total(payload: dict[str, Any], items: list[Any]) -> int:
        """Server total: pagination.total, then top-level total, then the item count."""
        pagination = payload.get("pagination") or {}
        for candidate in (pagination.get("total"), payload.get("total")):
            if isinstance(candidate, int) and candidate > 0:
                return candidate
        return len(items)

    async def _list[M: pydantic.BaseModel](
        self, path: str, model: type[M], params: dict[str, Any]
    ) -> Page[M]:
        payload = await self._request("GET", path, params=params)
        if not payload.get("success"):
            raise LookbookClientError(f"API reported failure listing {path}")
        raw = payload.get("data") or []
        try:
            items = [model.model_validate(record) for record in raw]
        except pydantic.ValidationError as e:
            raise LookbookClientError(f"Malformed records from {path}", detail=str(e)) from e
        return Page(items=items, total=self._total(payload, raw))

    async def _get[M: Profile | Project](self, path: str, model: type[M], slug: str) -> M:
        key = slug_key(model.__name__, slug)
        cached = self.cache.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]

        try:
            payload = await self._request("GET", f"{path}/{quote(slug, safe='')}")
        except LookbookClientError as e:
            if e.status_code == 404:
                raise EntityNotFoundError(model.__name__, slug) from None
            raise
        if not payload.get("success") or not payload.get("data"):
            raise EntityNotFoundError(model.__name__, slug)
        try:
            record = model.model_validate(payload["data"])
        except pydantic.ValidationError as e:
            raise LookbookClientError(f"Malformed {model.__name__} {slug}", detail=str(e)) from e

        self.cache.set(key, record)
        return record

    # =========================================================================
    # Profiles
    # =========================================================================

    async def list_profiles(
        self, *, limit: int, offset: int = 0, filters: PeopleFilters | None = None
    ) -> Page[Profile]:
        """List profiles matching ``filters``, server-side paginated."""
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        if filters is not None:
            params.update(filters.to_request_params())
        return await self._list("/profiles", Profile, params)

    async def get_profile(self, slug: str) -> Profile:
        """Get a profile by slug. Raises EntityNotFoundError if it does not exist."""
        return await self._get("/profiles", Profile, slug)

    async def profile_filters(self) -> PeopleFacets:
        payload = await self._request("GET", "/profiles/filters")
        if not payload.get("success"):
            raise LookbookClientError("API reported failure loading people filters")
        return PeopleFacets.model_validate(payload.get("data") or {})

    # =========================================================================
    # Projects
    # =========================================================================

    async def list_projects(
        self, *, limit: int, offset: int = 0, filters: ProjectFilters | None = None
    ) -> Page[Project]:
        """List projects matching ``filters``, server-side paginated."""
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        if filters is not None:
            params.update(filters.to_request_params())
        return await self._list("/projects", Project, params)

    async def get_project(self, slug: str) -> Project:
        """Get a project by slug. Raises EntityNotFoundError if it does not exist."""
        return await self._get("/projects", Project, slug)

    async def project_filters(self) -> ProjectFacets:
        payload = await self._request("GET", "/projects/filters")
        if not payload.get("success"):
            raise LookbookClientError("API reported failure loading project filters")
        return ProjectFacets.model_validate(payload.get("data") or {})


def get_client(base_url: str | None = None) -> LookbookClient:
    """Client for ``base_url``, falling back to LOOKBOOK_API_URL."""
    return LookbookClient(base_url=base_url)
