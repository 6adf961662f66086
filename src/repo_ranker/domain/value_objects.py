"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_ranker.domain.entities import Metric, RetrievalStrategy
from repo_ranker.domain.exceptions import InvalidRankingQueryError

_ORG_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9\-_.]*[A-Za-z0-9_.])?$")


@dataclass(frozen=True, slots=True)
class RankingQuery:
    """Validated parameters of one ranking call.

    Build it with :meth:`create`, which accepts raw strings for the enum
    fields (as they arrive from the CLI or query string) and rejects
    anything malformed.
    """

    org: str
    n: int
    metric: Metric = Metric.STARS
    strategy: RetrievalStrategy = RetrievalStrategy.REST

    @classmethod
    def create(
        cls,
        org: str,
        n: int,
        metric: Metric | str = Metric.STARS,
        strategy: RetrievalStrategy | str = RetrievalStrategy.REST,
    ) -> RankingQuery:
        """Parse and validate raw ranking parameters."""
        org = org.strip()
        if not org:
            raise InvalidRankingQueryError("Organization must not be empty.")
        if not _ORG_RE.match(org):
            raise InvalidRankingQueryError(f"Invalid organization name: '{org}'.")
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise InvalidRankingQueryError(f"n must be a non-negative integer, got {n!r}.")

        try:
            metric = Metric(metric)
        except ValueError:
            allowed = ", ".join(m.value for m in Metric)
            raise InvalidRankingQueryError(
                f"Unknown metric '{metric}'. Expected one of: {allowed}."
            ) from None

        try:
            strategy = RetrievalStrategy(strategy)
        except ValueError:
            allowed = ", ".join(s.value for s in RetrievalStrategy)
            raise InvalidRankingQueryError(
                f"Unknown retrieval strategy '{strategy}'. Expected one of: {allowed}."
            ) from None

        return cls(org=org, n=n, metric=metric, strategy=strategy)

    @property
    def search_query(self) -> str:
        """The GitHub search qualifier scoping results to the organization."""
        return f"org:{self.org}"
