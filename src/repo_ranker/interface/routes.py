"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from repo_ranker.domain.entities import Metric, RetrievalStrategy
from repo_ranker.domain.value_objects import RankingQuery
from repo_ranker.interface.dependencies import get_default_strategy, get_use_case
from repo_ranker.interface.schemas import ErrorResponse, TopReposResponse
from repo_ranker.services.rank_repos import RankReposUseCase

router = APIRouter()


@router.get(
    "/orgs/{org}/top-repos",
    response_model=TopReposResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Organization or repository not found"},
        403: {"model": ErrorResponse, "description": "GitHub denied access"},
        422: {"model": ErrorResponse, "description": "Invalid ranking parameters"},
        429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "GitHub request failed"},
    },
)
async def top_repos(
    org: str,
    n: int = Query(10, ge=1, description="How many repositories to return"),
    metric: Metric = Query(Metric.STARS),
    strategy: RetrievalStrategy | None = Query(None),
    use_case: RankReposUseCase = Depends(get_use_case),
    default_strategy: RetrievalStrategy = Depends(get_default_strategy),
) -> TopReposResponse:
    """Rank an organization's repositories by *metric* and return the top *n*."""
    query = RankingQuery.create(org, n, metric, strategy or default_strategy)
    result = await use_case.execute(query)
    return TopReposResponse.from_domain(result)
