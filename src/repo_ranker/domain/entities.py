"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union


class Metric(str, Enum):
    """The closed set of ranking metrics.

    Each member owns its sort key, so ranking never branches on the metric.
    """

    STARS = "stars"
    FORKS = "forks"
    PRS = "prs"
    CONTRIBS = "contribs"

    @property
    def remote_sortable(self) -> bool:
        """True when the GitHub search index can sort by this metric itself."""
        return self in (Metric.STARS, Metric.FORKS)

    @property
    def needs_pull_requests(self) -> bool:
        return self in (Metric.PRS, Metric.CONTRIBS)

    def sort_key(self, repo: RankableRepo) -> float:
        """Return the value this metric ranks *repo* by (higher is better)."""
        if self is Metric.STARS:
            return repo.stars
        if self is Metric.FORKS:
            return repo.forks
        if self is Metric.PRS:
            return repo.pull_requests  # type: ignore[union-attr]
        return repo.contribution_ratio  # type: ignore[union-attr]


class RetrievalStrategy(str, Enum):
    """How repositories are retrieved from GitHub."""

    REST = "rest"  # paginated search + per-repo pull-request lookups
    GRAPHQL = "graphql"  # one combined query carrying every metric


@dataclass(frozen=True, slots=True)
class RepoSnapshot:
    """One repository's metrics as decoded from a search page."""

    name: str
    stars: int
    forks: int
    has_issues: bool = True


@dataclass(frozen=True, slots=True)
class EnrichedRepo:
    """A snapshot whose pull-request total has been filled in.

    ``pull_requests`` is ``0`` for repositories the enrichment skipped
    (issues disabled, or no forks when ranking by contribution ratio).
    """

    snapshot: RepoSnapshot
    pull_requests: int

    @property
    def name(self) -> str:
        return self.snapshot.name

    @property
    def stars(self) -> int:
        return self.snapshot.stars

    @property
    def forks(self) -> int:
        return self.snapshot.forks

    @property
    def has_issues(self) -> bool:
        return self.snapshot.has_issues

    @property
    def contribution_ratio(self) -> float:
        """Pull requests per fork; exactly ``0.0`` for unforked repositories."""
        if self.forks == 0:
            return 0.0
        return self.pull_requests / self.forks


RankableRepo = Union[RepoSnapshot, EnrichedRepo]


@dataclass(frozen=True, slots=True)
class SearchPage:
    """One page of REST search results."""

    repos: list[RepoSnapshot]
    next_page: int | None = None


@dataclass(frozen=True, slots=True)
class CombinedPage:
    """One page of the combined GraphQL query."""

    repos: list[EnrichedRepo]
    end_cursor: str | None = None
    has_next_page: bool = False


@dataclass(frozen=True, slots=True)
class RankedResult:
    """The top-n repositories of an organization, best first."""

    org: str
    metric: Metric
    strategy: RetrievalStrategy
    repos: tuple[RankableRepo, ...]

    def __len__(self) -> int:
        return len(self.repos)

    def __iter__(self) -> Iterator[RankableRepo]:
        return iter(self.repos)
