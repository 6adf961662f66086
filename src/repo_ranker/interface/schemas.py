"""Pydantic response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel

from repo_ranker.domain.entities import (
    EnrichedRepo,
    Metric,
    RankableRepo,
    RankedResult,
    RetrievalStrategy,
)


class RankedRepoItem(BaseModel):
    """One entry of the ranking, ``rank`` starting at 1."""

    rank: int
    name: str
    stars: int
    forks: int
    pull_requests: int | None = None
    contribution_ratio: float | None = None

    @classmethod
    def from_domain(cls, rank: int, repo: RankableRepo) -> RankedRepoItem:
        if not isinstance(repo, EnrichedRepo):
            return cls(rank=rank, name=repo.name, stars=repo.stars, forks=repo.forks)
        return cls(
            rank=rank,
            name=repo.name,
            stars=repo.stars,
            forks=repo.forks,
            pull_requests=repo.pull_requests,
            contribution_ratio=repo.contribution_ratio,
        )


class TopReposResponse(BaseModel):
    """Successful response from ``GET /orgs/{org}/top-repos``."""

    org: str
    metric: Metric
    strategy: RetrievalStrategy
    repos: list[RankedRepoItem]

    @classmethod
    def from_domain(cls, result: RankedResult) -> TopReposResponse:
        return cls(
            org=result.org,
            metric=result.metric,
            strategy=result.strategy,
            repos=[
                RankedRepoItem.from_domain(i, repo)
                for i, repo in enumerate(result.repos, start=1)
            ],
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
