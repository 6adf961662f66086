"""Command-line interface — rank an organization's repositories from a shell.

Usage::

    repo-ranker --org netflix --n 10 --metric stars
    repo-ranker --org netflix --n 5 --metric contribs --fill-prs-concurrency 20
    repo-ranker --org netflix --n 5 --metric prs --strategy graphql --token ghp_...
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from typing import Sequence

from pydantic import SecretStr, ValidationError

from repo_ranker.domain.entities import (
    EnrichedRepo,
    Metric,
    RankableRepo,
    RankedResult,
    RetrievalStrategy,
)
from repo_ranker.domain.exceptions import InvalidRankingQueryError, RepoRankerError
from repo_ranker.domain.value_objects import RankingQuery
from repo_ranker.infrastructure.config import Settings, get_settings
from repo_ranker.infrastructure.http_client import create_http_client
from repo_ranker.interface.dependencies import build_use_case

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-ranker",
        description="List the top-n GitHub repositories of an organization by a metric.",
    )
    parser.add_argument("--org", required=True, help="the organization to get repos for")
    parser.add_argument("--n", type=int, required=True, help="the top n repos to get")
    parser.add_argument(
        "--metric",
        default=Metric.STARS.value,
        choices=[m.value for m in Metric],
        help="the metric to sort repos by (default: %(default)s)",
    )
    parser.add_argument(
        "--strategy",
        default=settings.retrieval_strategy.value,
        choices=[s.value for s in RetrievalStrategy],
        help="rest: search + per-repo PR lookups; graphql: one combined query "
        "(needs a token) (default: %(default)s)",
    )
    parser.add_argument(
        "--fill-prs-concurrency",
        type=int,
        default=settings.fill_prs_concurrency,
        help="concurrent pull-request lookups per batch for prs / contribs "
        "(default: %(default)s)",
    )
    parser.add_argument("--token", help="GitHub personal access token (default: $GITHUB_TOKEN)")
    parser.add_argument("--client-id", help="OAuth app client ID for higher rate limits")
    parser.add_argument("--client-secret", help="OAuth app client secret for higher rate limits")
    parser.add_argument(
        "--log-level", default=settings.log_level, help="logging level (default: %(default)s)"
    )
    return parser


def format_line(rank: int, repo: RankableRepo, metric: Metric) -> str:
    """Render one ranked repository the way the metric reads best."""
    if metric is Metric.STARS:
        return f'{rank}) repo: "{repo.name}", stars: {repo.stars}'
    if metric is Metric.FORKS:
        return f'{rank}) repo: "{repo.name}", forks: {repo.forks}'

    assert isinstance(repo, EnrichedRepo)
    if metric is Metric.PRS:
        return f'{rank}) repo: "{repo.name}", pull requests: {repo.pull_requests}'
    return (
        f'{rank}) repo: "{repo.name}", '
        f"contribution percentage: {repo.contribution_ratio * 100:.2f}%"
    )


def render(result: RankedResult) -> list[str]:
    return [format_line(i, repo, result.metric) for i, repo in enumerate(result, start=1)]


async def run(query: RankingQuery, settings: Settings) -> RankedResult:
    """Rank with a fresh HTTP client that lives for this one call."""
    async with create_http_client(settings) as client:
        use_case = build_use_case(client, settings)
        return await use_case.execute(query)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    update: dict[str, object] = {"fill_prs_concurrency": args.fill_prs_concurrency}
    if args.token:
        update["github_token"] = SecretStr(args.token)
    if args.client_id:
        update["github_client_id"] = args.client_id
        update["github_client_secret"] = SecretStr(args.client_secret)
    return settings.model_copy(update=update)


def main(argv: Sequence[str] | None = None) -> int:
    start = time.perf_counter()

    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.n < 1:
        parser.error("--n must be a positive integer")
    if args.fill_prs_concurrency < 1:
        parser.error("--fill-prs-concurrency must be a positive integer")
    if (args.client_id is None) != (args.client_secret is None):
        parser.error("either none or both of --client-id and --client-secret must be specified")
    try:
        query = RankingQuery.create(args.org, args.n, args.metric, args.strategy)
    except InvalidRankingQueryError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    settings = _apply_overrides(settings, args)

    print(f'Listing top {query.n} repos for org "{query.org}" by "{query.metric.value}"...')
    try:
        result = asyncio.run(run(query, settings))
    except RepoRankerError as exc:
        logger.error(
            'Error listing top %d repos for org "%s" by "%s": %s',
            query.n,
            query.org,
            query.metric.value,
            exc,
        )
        return 1

    for line in render(result):
        print(line)
    print(f"Took {time.perf_counter() - start:.3f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
