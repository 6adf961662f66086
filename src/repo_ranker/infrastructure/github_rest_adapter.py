"""GitHub REST API adapter — implements RepoSearchIndex and PullRequestCounter."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from repo_ranker.domain.entities import Metric, RepoSnapshot, SearchPage
from repo_ranker.domain.exceptions import (
    GitHubAccessDeniedError,
    GitHubRateLimitError,
    GitHubRequestError,
    OrganizationNotFoundError,
    RepoRankerError,
    RepositoryNotFoundError,
    ResponseDecodeError,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


class GitHubRestAdapter:
    """Concrete search index and pull-request counter backed by the GitHub v3 REST API."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = _GITHUB_API) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
        }

    async def search_page(
        self,
        query: str,
        page: int | None = None,
        sort: Metric | None = None,
        per_page: int = 100,
    ) -> SearchPage:
        """GET /search/repositories?q={query} → SearchPage."""
        params: dict[str, str] = {"q": query, "per_page": str(per_page)}
        if page is not None:
            params["page"] = str(page)
        if sort is not None:
            params["sort"] = sort.value
            params["order"] = "desc"

        resp = await self._api_get(
            "/search/repositories",
            params=params,
            not_found=OrganizationNotFoundError(
                f"GitHub search rejected '{query}'. Does the organization exist?"
            ),
        )
        data = _json(resp)

        try:
            repos = [
                RepoSnapshot(
                    name=item["name"],
                    stars=int(item["stargazers_count"]),
                    forks=int(item["forks_count"]),
                    has_issues=bool(item.get("has_issues", True)),
                )
                for item in data["items"]
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise ResponseDecodeError(
                f"Unexpected search result shape for '{query}': {exc!r}"
            ) from exc

        return SearchPage(repos=repos, next_page=_link_page(resp, "next"))

    async def count_pull_requests(self, org: str, repo: str) -> int:
        """GET /repos/{org}/{repo}/pulls?state=all&per_page=1 → total PR count.

        With one PR per page the number of the last page is the total.  A
        single-page response carries no ``last`` link, so the item count on
        that page (0 or 1) is the total instead.
        """
        resp = await self._api_get(
            f"/repos/{org}/{repo}/pulls",
            params={"state": "all", "per_page": "1"},
            not_found=RepositoryNotFoundError(f"Repository {org}/{repo} not found."),
        )

        last_page = _link_page(resp, "last")
        if last_page is not None:
            return last_page

        items = _json(resp)
        if not isinstance(items, list):
            raise ResponseDecodeError(
                f"Expected a list of pull requests for {org}/{repo}, got {type(items).__name__}"
            )
        return len(items)

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
        not_found: RepoRankerError | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._base_url}{endpoint}"
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.HTTPError as exc:
            raise GitHubRequestError(
                f"Network error fetching {url}: {exc}"
            ) from exc

        if resp.status_code == 200:
            return resp

        # Search answers 422 when the org qualifier names no searchable owner
        if resp.status_code in (404, 422) and not_found is not None:
            raise not_found

        if resp.status_code in (403, 429):
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if resp.status_code == 429 or remaining == "0":
                raise GitHubRateLimitError(
                    "GitHub API rate limit exceeded. "
                    f"Resets at {_reset_time(resp)}. "
                    "Set GITHUB_TOKEN (or a client id / secret pair) to increase the limit."
                )
            raise GitHubAccessDeniedError(f"GitHub denied access to {url}.")

        if resp.status_code == 401:
            raise GitHubAccessDeniedError("GitHub rejected the supplied credentials.")

        raise GitHubRequestError(
            f"GitHub API returned HTTP {resp.status_code} for {url}"
        )


# ── Helpers ─────────────────────────────────────────────────────────────────


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise ResponseDecodeError(
            f"GitHub returned a non-JSON body for {resp.request.url}"
        ) from exc


def _link_page(resp: httpx.Response, rel: str) -> int | None:
    """Page number of the ``rel`` relation in the ``Link`` header, if present."""
    link = resp.links.get(rel)
    if not link:
        return None
    page = httpx.URL(link["url"]).params.get("page")
    if page is None:
        raise ResponseDecodeError(f"Link rel=\"{rel}\" carries no page number: {link['url']}")
    try:
        return int(page)
    except ValueError as exc:
        raise ResponseDecodeError(f"Non-numeric page in Link rel=\"{rel}\": {page}") from exc


def _reset_time(resp: httpx.Response) -> str:
    reset_raw = resp.headers.get("x-ratelimit-reset", "")
    try:
        return datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (ValueError, OSError):
        return reset_raw or "unknown"
