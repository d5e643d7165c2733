"""Tests for repository scoring."""

import logging
from datetime import timedelta

import pytest

from harborrp.domain import FactorBucket, FactorSpec, RepoCandidate, RetentionPolicy
from harborrp.services.scoring import explain, score, score_candidates


def make_repo(now, days_ago=10.0, pull_count=5, tags_count=3, repo_id=1):
    return RepoCandidate(
        id=repo_id,
        name=f"library/repo{repo_id}",
        pull_count=pull_count,
        tags_count=tags_count,
        update_time=now - timedelta(days=days_ago),
    )


@pytest.fixture
def policy():
    return RetentionPolicy(
        update_time=FactorSpec(base=10.0, buckets=(FactorBucket(0, 30, 1.0),)),
        pull_count=FactorSpec(base=5.0, buckets=(FactorBucket(100, 1000, 3.0),)),
        tags_count=FactorSpec(base=2.0, buckets=(FactorBucket(10, 20, 4.0),)),
    )


class TestScore:
    """Tests for the weighted score."""

    def test_documented_example(self, policy, now):
        """10 days old, unmatched pull and tag counts: 10*1 + 5*1 + 2*1."""
        repo = make_repo(now, days_ago=10, pull_count=5, tags_count=3)
        assert score(repo, policy, now) == 17.0

    def test_all_metrics_matched(self, policy, now):
        repo = make_repo(now, days_ago=10, pull_count=500, tags_count=15)
        assert score(repo, policy, now) == 10.0 * 1.0 + 5.0 * 3.0 + 2.0 * 4.0

    def test_unmatched_update_time_defaults_to_zero(self, policy, now):
        repo = make_repo(now, days_ago=45, pull_count=5, tags_count=3)
        breakdown = explain(repo, policy, now)

        assert breakdown.update_weight == 0.0
        assert breakdown.update_defaulted
        assert breakdown.score == 5.0 + 2.0

    def test_unmatched_counts_default_to_one(self, policy, now):
        breakdown = explain(make_repo(now, pull_count=5, tags_count=3), policy, now)

        assert breakdown.pull_weight == 1.0
        assert breakdown.tags_weight == 1.0
        assert breakdown.pull_defaulted and breakdown.tags_defaulted
        assert not breakdown.update_defaulted

    def test_empty_policy_hits_defaults(self, now):
        policy = RetentionPolicy(
            update_time=FactorSpec(base=10.0),
            pull_count=FactorSpec(base=5.0),
            tags_count=FactorSpec(base=2.0),
        )
        assert score(make_repo(now), policy, now) == 7.0

    def test_age_truncated_for_matching(self, now):
        """29.9 days still falls in [0, 30)."""
        policy = RetentionPolicy(update_time=FactorSpec(base=1.0, buckets=(FactorBucket(0, 30, 2.0),)))
        assert score(make_repo(now, days_ago=29.9), policy, now) == 2.0 + 0.0 + 0.0
        assert score(make_repo(now, days_ago=30.0), policy, now) == 0.0

    def test_future_update_time_falls_through(self, policy, now):
        """Clock skew of more than a day misses buckets starting at 0."""
        repo = make_repo(now, days_ago=-1.5)
        breakdown = explain(repo, policy, now)

        assert breakdown.age_days < -1
        assert breakdown.update_defaulted
        assert breakdown.update_weight == 0.0

    def test_less_than_a_day_ahead_counts_as_age_zero(self, policy, now):
        """Ages truncate toward zero: -0.5 days lands in [0, 30)."""
        breakdown = explain(make_repo(now, days_ago=-0.5), policy, now)

        assert breakdown.age_days == -0.5
        assert not breakdown.update_defaulted
        assert breakdown.update_weight == 1.0

    def test_first_matching_bucket_wins(self, now):
        policy = RetentionPolicy(update_time=FactorSpec(base=1.0, buckets=(
            FactorBucket(0, 100, 0.25),
            FactorBucket(0, 10, 0.75),
        )))
        assert explain(make_repo(now, days_ago=5), policy, now).update_weight == 0.25

    def test_matched_zero_weight_is_not_defaulted(self, now):
        policy = RetentionPolicy(pull_count=FactorSpec(base=5.0, buckets=(FactorBucket(0, 10, 0.0),)))
        breakdown = explain(make_repo(now, pull_count=5), policy, now)

        assert breakdown.pull_weight == 0.0
        assert not breakdown.pull_defaulted

    def test_score_is_deterministic(self, policy, now):
        repo = make_repo(now, days_ago=12.3, pull_count=150, tags_count=12)
        assert score(repo, policy, now) == score(repo, policy, now)

    def test_breakdown_is_logged(self, policy, now, caplog):
        with caplog.at_level(logging.INFO, logger="harborrp.services.scoring"):
            score(make_repo(now, repo_id=99), policy, now)
        assert "repo_id: 99" in caplog.text
        assert "= 17.00" in caplog.text


class TestScoreCandidates:
    """Tests for score_candidates()."""

    def test_attaches_scores_without_mutating(self, policy, now):
        repos = [make_repo(now, repo_id=1), make_repo(now, days_ago=60, repo_id=2)]

        scored = score_candidates(repos, policy, now)

        assert [r.score for r in scored] == [17.0, 7.0]
        assert all(r.score is None for r in repos)

    def test_breakdown_to_dict(self, policy, now):
        d = explain(make_repo(now), policy, now).to_dict()
        assert d['score'] == 17.0
        assert d['defaulted'] == {'update_time': False, 'pull_count': True, 'tags_count': True}
