"""FastAPI dependency injection wiring."""

from __future__ import annotations

from functools import lru_cache

import httpx

from repo_ranker.domain.entities import RetrievalStrategy
from repo_ranker.infrastructure.config import Settings, get_settings
from repo_ranker.infrastructure.github_graphql_adapter import GitHubGraphQLAdapter
from repo_ranker.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_ranker.infrastructure.http_client import create_http_client
from repo_ranker.services.rank_repos import RankReposUseCase

_http_client: httpx.AsyncClient | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    _http_client = create_http_client(get_settings())


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return get_settings()


def build_use_case(client: httpx.AsyncClient, settings: Settings) -> RankReposUseCase:
    """Wire the REST and GraphQL adapters around one shared HTTP client."""
    rest = GitHubRestAdapter(client=client, base_url=settings.github_api_url)
    graphql = GitHubGraphQLAdapter(client=client, endpoint=settings.github_graphql_url)
    return RankReposUseCase(
        search_index=rest,
        pr_counter=rest,
        combined_index=graphql,
        fill_prs_concurrency=settings.fill_prs_concurrency,
    )


def get_use_case() -> RankReposUseCase:
    """Build the use case with injected adapters."""
    assert _http_client is not None, "startup() was not called"
    return build_use_case(_http_client, _settings())


def get_default_strategy() -> RetrievalStrategy:
    return _settings().retrieval_strategy
