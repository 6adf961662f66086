"""Repository fetcher — walks the paginated search results of an organization.

Two flavours exist, one per retrieval strategy:

* :func:`fetch_snapshots` pages through the REST search index.  When the
  metric is one the index can sort by (stars, forks) and a *limit* is
  given, it asks for a descending server-side sort and stops as soon as
  *limit* repositories are in hand.  The index's sort is global across
  pages, so the early stop returns exactly the top of the full list.
* :func:`fetch_combined` pages through the GraphQL search, which already
  carries pull-request totals.  It always exhausts every page; ranking is
  done locally.

Pages are requested strictly one after another since each page token comes
from the previous response.  Any failed page aborts the fetch.
"""

from __future__ import annotations

import logging

from repo_ranker.domain.entities import EnrichedRepo, Metric, RepoSnapshot
from repo_ranker.domain.ports.repo_index import CombinedRepoIndex, RepoSearchIndex

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


async def fetch_snapshots(
    index: RepoSearchIndex,
    search_query: str,
    metric: Metric,
    limit: int | None = None,
) -> tuple[list[RepoSnapshot], bool]:
    """Collect repository snapshots from the REST search index.

    Returns the snapshots and whether they are already ordered by *metric*
    (i.e. the server-side sort was used).  *limit* only takes effect for
    remotely sortable metrics.
    """
    presorted = metric.remote_sortable
    sort = metric if presorted else None
    early_return = presorted and limit is not None

    repos: list[RepoSnapshot] = []
    if early_return and limit <= 0:  # type: ignore[operator]
        return repos, presorted

    page: int | None = None
    while True:
        result = await index.search_page(search_query, page=page, sort=sort, per_page=PAGE_SIZE)
        logger.debug(
            "Search page %s for %s: %d repos", page or 1, search_query, len(result.repos)
        )

        for repo in result.repos:
            repos.append(repo)
            if early_return and len(repos) >= limit:  # type: ignore[operator]
                logger.info(
                    "Fetched top %d repos for %s by %s (early return)",
                    len(repos),
                    search_query,
                    metric.value,
                )
                return repos, presorted

        if result.next_page is None:
            break
        page = result.next_page

    logger.info("Fetched %d repos for %s", len(repos), search_query)
    return repos, presorted


async def fetch_combined(index: CombinedRepoIndex, search_query: str) -> list[EnrichedRepo]:
    """Collect every repository, with pull-request totals, from the combined query."""
    repos: list[EnrichedRepo] = []
    cursor: str | None = None
    while True:
        page = await index.query_page(search_query, cursor=cursor, per_page=PAGE_SIZE)
        logger.debug(
            "Combined page after %s for %s: %d repos", cursor, search_query, len(page.repos)
        )
        repos.extend(page.repos)

        if not page.has_next_page:
            break
        cursor = page.end_cursor

    logger.info("Fetched %d repos with pull-request totals for %s", len(repos), search_query)
    return repos
