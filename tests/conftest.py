"""Shared fixtures: the netflix repository set, in-memory ports, a fake GitHub."""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Callable

import httpx
import pytest

from repo_ranker.domain.entities import (
    CombinedPage,
    EnrichedRepo,
    Metric,
    RepoSnapshot,
    SearchPage,
)

# name, stars, forks, pull requests
NETFLIX = [
    ("security_monkey", 10047, 792, 55),
    ("metaflow", 20787, 2963, 34555),
    ("SimianArmy", 0, 4253, 39811),
    ("chaosmonkey", 1, 1017, 1),
    ("zuul", 0, 0, 2305),
    ("Hystrix", 10248, 728, 0),
    ("boqboqboq", 64, 9, 1),
]


@pytest.fixture
def netflix_repos() -> list[dict[str, Any]]:
    return [
        {"name": name, "stars": stars, "forks": forks, "prs": prs, "has_issues": True}
        for name, stars, forks, prs in NETFLIX
    ]


@pytest.fixture
def netflix_snapshots(netflix_repos: list[dict[str, Any]]) -> list[RepoSnapshot]:
    return [
        RepoSnapshot(name=r["name"], stars=r["stars"], forks=r["forks"], has_issues=r["has_issues"])
        for r in netflix_repos
    ]


@pytest.fixture
def netflix_pr_counts(netflix_repos: list[dict[str, Any]]) -> dict[str, int]:
    return {r["name"]: r["prs"] for r in netflix_repos}


# ── In-memory ports ─────────────────────────────────────────────────────────


class FakeSearchIndex:
    """A search index whose server-side sort is globally correct."""

    def __init__(self, repos: list[RepoSnapshot], page_size: int | None = None) -> None:
        self._repos = list(repos)
        self._page_size = page_size
        self.calls: list[dict[str, Any]] = []

    async def search_page(
        self,
        query: str,
        page: int | None = None,
        sort: Metric | None = None,
        per_page: int = 100,
    ) -> SearchPage:
        self.calls.append({"query": query, "page": page, "sort": sort, "per_page": per_page})
        items = list(self._repos)
        if sort is not None:
            items.sort(key=sort.sort_key, reverse=True)
        size = self._page_size or per_page
        current = page or 1
        chunk = items[(current - 1) * size : current * size]
        next_page = current + 1 if current * size < len(items) else None
        return SearchPage(repos=chunk, next_page=next_page)


class FakePullRequestCounter:
    """Counts pull requests from a dict and records how lookups overlapped."""

    def __init__(
        self,
        counts: dict[str, int],
        failing: dict[str, Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self._counts = counts
        self._failing = failing or {}
        self._delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.started: list[str] = []
        self.finished: list[str] = []
        self.events: list[tuple[str, str]] = []

    async def count_pull_requests(self, org: str, repo: str) -> int:
        self.started.append(repo)
        self.events.append(("start", repo))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delay)
            if repo in self._failing:
                raise self._failing[repo]
            return self._counts[repo]
        finally:
            self.in_flight -= 1
            self.finished.append(repo)
            self.events.append(("finish", repo))


class FakeCombinedIndex:
    def __init__(self, repos: list[EnrichedRepo], page_size: int = 100) -> None:
        self._repos = list(repos)
        self._page_size = page_size
        self.cursors: list[str | None] = []

    async def query_page(
        self, query: str, cursor: str | None = None, per_page: int = 100
    ) -> CombinedPage:
        self.cursors.append(cursor)
        start = int(cursor) if cursor else 0
        end = start + min(per_page, self._page_size)
        has_next = end < len(self._repos)
        return CombinedPage(
            repos=self._repos[start:end],
            end_cursor=str(end) if has_next else None,
            has_next_page=has_next,
        )


@pytest.fixture
def make_search_index() -> Callable[..., FakeSearchIndex]:
    return FakeSearchIndex


@pytest.fixture
def make_pr_counter() -> Callable[..., FakePullRequestCounter]:
    return FakePullRequestCounter


@pytest.fixture
def make_combined_index() -> Callable[..., FakeCombinedIndex]:
    return FakeCombinedIndex


# ── Fake GitHub HTTP API ────────────────────────────────────────────────────


class FakeGitHub:
    """Serves /search/repositories, /repos/{org}/{repo}/pulls and /graphql.

    ``page_size`` caps the page length regardless of what the client asks
    for, so a handful of repos still spans several pages.
    """

    def __init__(self, repos: list[dict[str, Any]], page_size: int = 100) -> None:
        self.repos = repos
        self.page_size = page_size
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response] = {}

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport())

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.responses:
            return self.responses[path]
        if path == "/search/repositories":
            return self._search(request)
        if path == "/graphql":
            return self._graphql(request)
        match = re.fullmatch(r"/repos/([^/]+)/([^/]+)/pulls", path)
        if match:
            return self._pulls(request, match.group(2))
        return httpx.Response(404, json={"message": "Not Found"})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def _search(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        items = list(self.repos)
        sort = params.get("sort")
        if sort in ("stars", "forks"):
            items.sort(key=lambda r: r[sort], reverse=True)

        per_page = min(int(params.get("per_page", "30")), self.page_size)
        page = int(params.get("page", "1"))
        chunk = items[(page - 1) * per_page : page * per_page]

        headers = {}
        if page * per_page < len(items):
            next_url = request.url.copy_set_param("page", str(page + 1))
            headers["Link"] = f'<{next_url}>; rel="next"'

        body = {
            "total_count": len(items),
            "items": [
                {
                    "name": r["name"],
                    "stargazers_count": r["stars"],
                    "forks_count": r["forks"],
                    "has_issues": r["has_issues"],
                }
                for r in chunk
            ],
        }
        return httpx.Response(200, json=body, headers=headers)

    def _pulls(self, request: httpx.Request, name: str) -> httpx.Response:
        repo = next((r for r in self.repos if r["name"] == name), None)
        if repo is None:
            return httpx.Response(404, json={"message": "Not Found"})

        count = repo["prs"]
        headers = {}
        if count > 1:
            last_url = request.url.copy_set_param("page", str(count))
            headers["Link"] = f'<{last_url}>; rel="last"'
        # One PR per page; its contents do not matter
        body = [{"number": 1}] if count > 0 else []
        return httpx.Response(200, json=body, headers=headers)

    def _graphql(self, request: httpx.Request) -> httpx.Response:
        variables = json.loads(request.content)["variables"]
        start = int(variables["cursor"]) if variables.get("cursor") else 0
        end = start + min(variables["first"], self.page_size)
        has_next = end < len(self.repos)
        edges = [
            {
                "node": {
                    "name": r["name"],
                    "stargazerCount": r["stars"],
                    "forkCount": r["forks"],
                    "hasIssuesEnabled": r["has_issues"],
                    "pullRequests": {"totalCount": r["prs"]},
                }
            }
            for r in self.repos[start:end]
        ]
        body = {
            "data": {
                "search": {
                    "edges": edges,
                    "pageInfo": {
                        "endCursor": str(end),
                        "hasNextPage": has_next,
                    },
                }
            }
        }
        return httpx.Response(200, json=body)


@pytest.fixture
def fake_github(netflix_repos: list[dict[str, Any]]) -> FakeGitHub:
    return FakeGitHub(netflix_repos)


@pytest.fixture
def make_fake_github() -> Callable[..., FakeGitHub]:
    return FakeGitHub
