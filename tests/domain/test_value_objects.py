from __future__ import annotations

import pytest

from repo_ranker.domain.entities import Metric, RetrievalStrategy
from repo_ranker.domain.exceptions import InvalidRankingQueryError
from repo_ranker.domain.value_objects import RankingQuery


class TestRankingQuery:
    def test_parses_raw_values(self):
        query = RankingQuery.create("  netflix ", 3, "prs", "graphql")
        assert query == RankingQuery("netflix", 3, Metric.PRS, RetrievalStrategy.GRAPHQL)

    def test_defaults_to_stars_over_rest(self):
        query = RankingQuery.create("netflix", 1)
        assert query.metric is Metric.STARS
        assert query.strategy is RetrievalStrategy.REST

    def test_search_query_is_scoped_to_org(self):
        assert RankingQuery.create("netflix", 1).search_query == "org:netflix"

    def test_zero_is_a_valid_n(self):
        assert RankingQuery.create("netflix", 0).n == 0

    @pytest.mark.parametrize("org", ["", "   ", "net flix", "org:other", "-leading"])
    def test_rejects_bad_org(self, org):
        with pytest.raises(InvalidRankingQueryError):
            RankingQuery.create(org, 1)

    @pytest.mark.parametrize("n", [-1, 1.5, True, "3"])
    def test_rejects_bad_n(self, n):
        with pytest.raises(InvalidRankingQueryError):
            RankingQuery.create("netflix", n)

    def test_rejects_unknown_metric(self):
        with pytest.raises(InvalidRankingQueryError, match="stars, forks, prs, contribs"):
            RankingQuery.create("netflix", 1, "watchers")

    def test_rejects_unknown_strategy(self):
        with pytest.raises(InvalidRankingQueryError, match="strategy"):
            RankingQuery.create("netflix", 1, "stars", "soap")
