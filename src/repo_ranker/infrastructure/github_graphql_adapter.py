"""GitHub GraphQL API adapter — implements the CombinedRepoIndex port."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from repo_ranker.domain.entities import CombinedPage, EnrichedRepo, RepoSnapshot
from repo_ranker.domain.exceptions import (
    GitHubAccessDeniedError,
    GitHubRateLimitError,
    GitHubRequestError,
    OrganizationNotFoundError,
    ResponseDecodeError,
)

logger = logging.getLogger(__name__)

_GITHUB_GRAPHQL = "https://api.github.com/graphql"

SEARCH_QUERY = """\
query($query: String!, $first: Int!, $cursor: String) {
  search(query: $query, type: REPOSITORY, first: $first, after: $cursor) {
    edges {
      node {
        ... on Repository {
          name
          stargazerCount
          forkCount
          hasIssuesEnabled
          pullRequests {
            totalCount
          }
        }
      }
    }
    pageInfo {
      endCursor
      hasNextPage
    }
  }
}
"""


class GitHubGraphQLAdapter:
    """Concrete ``CombinedRepoIndex`` backed by the GitHub v4 GraphQL API."""

    def __init__(self, client: httpx.AsyncClient, endpoint: str = _GITHUB_GRAPHQL) -> None:
        self._client = client
        self._endpoint = endpoint

    async def query_page(
        self, query: str, cursor: str | None = None, per_page: int = 100
    ) -> CombinedPage:
        """Run one page of the combined search → CombinedPage."""
        data = await self._execute(
            SEARCH_QUERY,
            {"query": query, "first": per_page, "cursor": cursor},
        )

        try:
            search = data["search"]
            repos = [_decode_node(edge["node"]) for edge in search["edges"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise ResponseDecodeError(
                f"Unexpected GraphQL search shape for '{query}': {exc!r}"
            ) from exc

        # A response without pageInfo is a single, final page
        page_info = search.get("pageInfo") or {}
        has_next = bool(page_info.get("hasNextPage", False))
        end_cursor = page_info.get("endCursor")
        if has_next and not end_cursor:
            raise ResponseDecodeError("GraphQL search reported a next page without an end cursor.")

        return CombinedPage(repos=repos, end_cursor=end_cursor, has_next_page=has_next)

    async def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL document and return its ``data`` member."""
        try:
            resp = await self._client.post(
                self._endpoint, json={"query": query, "variables": variables}
            )
        except httpx.HTTPError as exc:
            raise GitHubRequestError(
                f"Network error querying {self._endpoint}: {exc}"
            ) from exc

        if resp.status_code == 401:
            raise GitHubAccessDeniedError(
                "GitHub GraphQL API requires authentication. Set GITHUB_TOKEN."
            )
        if resp.status_code in (403, 429):
            if resp.status_code == 429 or resp.headers.get("x-ratelimit-remaining") == "0":
                raise GitHubRateLimitError("GitHub GraphQL rate limit exceeded.")
            raise GitHubAccessDeniedError("GitHub denied the GraphQL query.")
        if resp.status_code != 200:
            raise GitHubRequestError(
                f"GitHub GraphQL API returned HTTP {resp.status_code}"
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise ResponseDecodeError("GitHub GraphQL API returned a non-JSON body.") from exc

        if not isinstance(payload, dict):
            raise ResponseDecodeError("GitHub GraphQL API returned a non-object body.")

        errors = payload.get("errors")
        if errors:
            messages = [str(err.get("message", err)) for err in errors if isinstance(err, dict)]
            logger.debug("GraphQL errors: %s", messages)
            if any(err.get("type") == "RATE_LIMITED" for err in errors if isinstance(err, dict)):
                raise GitHubRateLimitError(f"GitHub GraphQL rate limit exceeded: {messages}")
            if any("cannot be searched" in msg for msg in messages):
                raise OrganizationNotFoundError(f"GitHub search rejected the query: {messages}")
            raise ResponseDecodeError(f"GraphQL errors: {messages}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise ResponseDecodeError("GraphQL response carries no data.")
        return data


def _decode_node(node: dict[str, Any]) -> EnrichedRepo:
    snapshot = RepoSnapshot(
        name=node["name"],
        stars=int(node["stargazerCount"]),
        forks=int(node["forkCount"]),
        has_issues=bool(node.get("hasIssuesEnabled", True)),
    )
    # Same rule as REST enrichment: issues disabled means no PR total
    pull_requests = int(node["pullRequests"]["totalCount"]) if snapshot.has_issues else 0
    return EnrichedRepo(snapshot=snapshot, pull_requests=pull_requests)
