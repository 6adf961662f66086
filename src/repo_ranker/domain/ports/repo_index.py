"""Ports: remote repository index — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_ranker.domain.entities import CombinedPage, Metric, SearchPage


class RepoSearchIndex(Protocol):
    """Paginated repository search, optionally sorted server-side."""

    async def search_page(
        self,
        query: str,
        page: int | None = None,
        sort: Metric | None = None,
        per_page: int = 100,
    ) -> SearchPage:
        """Return one page of repositories matching *query*.

        When *sort* is given the index orders results descending by that
        metric across all pages.
        """
        ...


class PullRequestCounter(Protocol):
    """Per-repository pull-request total lookup."""

    async def count_pull_requests(self, org: str, repo: str) -> int:
        """Return the number of pull requests (any state) for ``org/repo``."""
        ...


class CombinedRepoIndex(Protocol):
    """Search returning stars, forks and pull-request totals in one query."""

    async def query_page(
        self, query: str, cursor: str | None = None, per_page: int = 100
    ) -> CombinedPage:
        """Return one page of fully enriched repositories matching *query*."""
        ...
