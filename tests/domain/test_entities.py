from __future__ import annotations

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from repo_ranker.domain.entities import EnrichedRepo, Metric, RankedResult, RepoSnapshot, RetrievalStrategy


class TestMetric:
    def test_parses_from_string(self):
        assert Metric("contribs") is Metric.CONTRIBS

    def test_only_stars_and_forks_are_remote_sortable(self):
        assert {m for m in Metric if m.remote_sortable} == {Metric.STARS, Metric.FORKS}

    def test_prs_and_contribs_need_pull_requests(self):
        assert {m for m in Metric if m.needs_pull_requests} == {Metric.PRS, Metric.CONTRIBS}

    def test_sort_keys(self):
        repo = EnrichedRepo(RepoSnapshot("metaflow", 20787, 2963), pull_requests=34555)
        assert Metric.STARS.sort_key(repo) == 20787
        assert Metric.FORKS.sort_key(repo) == 2963
        assert Metric.PRS.sort_key(repo) == 34555
        assert Metric.CONTRIBS.sort_key(repo) == pytest.approx(11.662, abs=1e-3)


class TestEnrichedRepo:
    def test_delegates_snapshot_fields(self):
        repo = EnrichedRepo(RepoSnapshot("zuul", 3, 4, has_issues=False), pull_requests=0)
        assert (repo.name, repo.stars, repo.forks, repo.has_issues) == ("zuul", 3, 4, False)

    def test_pull_requests_cannot_be_rewritten(self):
        repo = EnrichedRepo(RepoSnapshot("zuul", 0, 0), pull_requests=2305)
        with pytest.raises(dataclasses.FrozenInstanceError):
            repo.pull_requests = 1  # type: ignore[misc]

    @given(prs=st.integers(min_value=0, max_value=10**7))
    def test_contribution_ratio_is_zero_without_forks(self, prs):
        repo = EnrichedRepo(RepoSnapshot("r", 0, 0), pull_requests=prs)
        assert repo.contribution_ratio == 0.0

    @given(
        prs=st.integers(min_value=0, max_value=10**7),
        forks=st.integers(min_value=1, max_value=10**6),
    )
    def test_contribution_ratio_is_prs_per_fork(self, prs, forks):
        repo = EnrichedRepo(RepoSnapshot("r", 0, forks), pull_requests=prs)
        assert repo.contribution_ratio == prs / forks


def test_ranked_result_behaves_like_a_sequence():
    repos = (RepoSnapshot("a", 2, 0), RepoSnapshot("b", 1, 0))
    result = RankedResult("org", Metric.STARS, RetrievalStrategy.REST, repos)
    assert len(result) == 2
    assert [r.name for r in result] == ["a", "b"]
