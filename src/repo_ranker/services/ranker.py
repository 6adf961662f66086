"""Ranker — orders repositories by a metric and keeps the top-n."""

from __future__ import annotations

from typing import Sequence

from repo_ranker.domain.entities import EnrichedRepo, Metric, RankableRepo
from repo_ranker.domain.exceptions import UnenrichedRepositoryError


def rank(
    repos: Sequence[RankableRepo],
    metric: Metric,
    n: int,
    presorted: bool = False,
) -> list[RankableRepo]:
    """Return the best *n* of *repos* by *metric*, best first.

    The sort is stable: repositories with equal values keep the order the
    fetch produced them in.  Pass ``presorted=True`` when the search index
    already ordered *repos* by *metric*; only truncation happens then.
    """
    if metric.needs_pull_requests:
        bare = [r.name for r in repos if not isinstance(r, EnrichedRepo)]
        if bare:
            raise UnenrichedRepositoryError(
                f"Cannot rank by {metric.value} before pull-request enrichment: "
                f"{', '.join(bare[:5])}"
            )

    if presorted:
        ordered = list(repos)
    else:
        ordered = sorted(repos, key=metric.sort_key, reverse=True)

    return ordered[: max(n, 0)]
