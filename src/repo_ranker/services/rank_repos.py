"""Rank-repositories use case — the main orchestration pipeline.

This is the single entry point for the business logic.  It depends only on
the repository-index ports and the pure service modules.  The interface
layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import logging
from typing import Sequence

from repo_ranker.domain.entities import (
    RankableRepo,
    RankedResult,
    RetrievalStrategy,
)
from repo_ranker.domain.exceptions import StrategyUnavailableError
from repo_ranker.domain.ports.repo_index import (
    CombinedRepoIndex,
    PullRequestCounter,
    RepoSearchIndex,
)
from repo_ranker.domain.value_objects import RankingQuery
from repo_ranker.services.enricher import PullRequestEnricher
from repo_ranker.services.fetcher import fetch_combined, fetch_snapshots
from repo_ranker.services.ranker import rank

logger = logging.getLogger(__name__)


class RankReposUseCase:
    """Orchestrates fetch → [enrich] → rank for one organization.

    Parameters
    ----------
    search_index:
        Paginated REST search (REST strategy).
    pr_counter:
        Per-repository pull-request lookup (REST strategy, prs / contribs).
    combined_index:
        Combined GraphQL search (GraphQL strategy).  Optional; without it
        only the REST strategy is available.
    fill_prs_concurrency:
        Maximum number of pull-request lookups in flight.
    """

    def __init__(
        self,
        search_index: RepoSearchIndex,
        pr_counter: PullRequestCounter,
        combined_index: CombinedRepoIndex | None = None,
        fill_prs_concurrency: int = 10,
    ) -> None:
        self._search = search_index
        self._combined = combined_index
        self._enricher = PullRequestEnricher(pr_counter, fill_prs_concurrency)

    async def execute(self, query: RankingQuery) -> RankedResult:
        """Rank the organization's repositories and return the top-n."""
        logger.info(
            "Ranking top %d repos of %s by %s (%s)",
            query.n,
            query.org,
            query.metric.value,
            query.strategy.value,
        )

        if query.strategy is RetrievalStrategy.GRAPHQL:
            top = await self._rank_combined(query)
        else:
            top = await self._rank_paginated(query)

        logger.info("Ranked %d repos of %s", len(top), query.org)
        return RankedResult(
            org=query.org,
            metric=query.metric,
            strategy=query.strategy,
            repos=tuple(top),
        )

    async def _rank_paginated(self, query: RankingQuery) -> list[RankableRepo]:
        snapshots, presorted = await fetch_snapshots(
            self._search, query.search_query, query.metric, limit=query.n
        )

        repos: Sequence[RankableRepo] = snapshots
        if query.metric.needs_pull_requests:
            repos = await self._enricher.enrich(query.org, snapshots, query.metric)

        return rank(repos, query.metric, query.n, presorted=presorted)

    async def _rank_combined(self, query: RankingQuery) -> list[RankableRepo]:
        if self._combined is None:
            raise StrategyUnavailableError(
                "The GraphQL strategy is not configured for this ranker."
            )
        repos = await fetch_combined(self._combined, query.search_query)
        # The combined fetch order knows nothing about the metric
        return rank(repos, query.metric, query.n)
