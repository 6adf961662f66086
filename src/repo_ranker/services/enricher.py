"""Pull-request enrichment — fills in the metric the search index lacks.

The REST search index returns stars and forks but no pull-request totals,
so each repository needs one extra lookup.  Lookups run in consecutive
batches of at most ``concurrency`` coroutines; a batch is a barrier, and
the next one starts only after every lookup of the current one has
returned.  This caps outstanding requests strictly, which keeps the
caller under GitHub's secondary rate limits.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from repo_ranker.domain.entities import EnrichedRepo, Metric, RepoSnapshot
from repo_ranker.domain.ports.repo_index import PullRequestCounter

logger = logging.getLogger(__name__)


def needs_lookup(repo: RepoSnapshot, metric: Metric) -> bool:
    """Whether a pull-request lookup can influence *repo*'s rank."""
    if not repo.has_issues:
        return False
    # Contribution ratio is 0 for unforked repos whatever the PR count
    if metric is Metric.CONTRIBS and repo.forks == 0:
        return False
    return True


class PullRequestEnricher:
    """Turns snapshots into :class:`EnrichedRepo` via batched lookups.

    Parameters
    ----------
    counter:
        Adapter answering "how many pull requests does org/repo have?".
    concurrency:
        Batch size, i.e. the maximum number of lookups in flight.
    """

    def __init__(self, counter: PullRequestCounter, concurrency: int = 10) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        self._counter = counter
        self._concurrency = concurrency

    async def enrich(
        self, org: str, repos: Sequence[RepoSnapshot], metric: Metric
    ) -> list[EnrichedRepo]:
        """Return one enriched repo per snapshot, in the same order.

        The first failed lookup (in batch order) is re-raised once its batch
        has settled; later batches never start.
        """
        enriched: list[EnrichedRepo] = []
        skipped = 0

        for start in range(0, len(repos), self._concurrency):
            batch = repos[start : start + self._concurrency]
            logger.debug(
                "Enriching repos %d-%d of %d for %s",
                start + 1,
                start + len(batch),
                len(repos),
                org,
            )
            totals = await self._run_batch(org, batch, metric)
            for repo, total in zip(batch, totals):
                if total is None:
                    skipped += 1
                    total = 0
                enriched.append(EnrichedRepo(snapshot=repo, pull_requests=total))

        if skipped:
            logger.debug("Skipped pull-request lookup for %d repos of %s", skipped, org)
        return enriched

    async def _run_batch(
        self, org: str, batch: Sequence[RepoSnapshot], metric: Metric
    ) -> list[int | None]:
        """Look up every eligible repo of *batch* concurrently; ``None`` marks a skip."""
        pending = [repo for repo in batch if needs_lookup(repo, metric)]
        outcomes = await asyncio.gather(
            *(self._counter.count_pull_requests(org, repo.name) for repo in pending),
            return_exceptions=True,
        )

        for repo, outcome in zip(pending, outcomes):
            if isinstance(outcome, BaseException):
                logger.debug("Pull-request lookup failed for %s/%s", org, repo.name)
                raise outcome

        counts = {repo.name: outcome for repo, outcome in zip(pending, outcomes)}
        return [counts.get(repo.name) for repo in batch]  # type: ignore[misc]
