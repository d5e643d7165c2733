"""
Repository scoring for harborrp.

A repository's score is a weighted sum over three metrics:

    score = base_u * w_u + base_p * w_p + base_t * w_t

where each weight comes from the first policy bucket containing the metric.
Lower scores mean less valuable repositories, which are deleted first.

When no bucket matches, the update-time weight defaults to 0 while the
pull-count and tags-count weights default to 1.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Iterable, List, Optional

from ..domain import RepoCandidate, RetentionPolicy
from ..domain.tag import days_between

logger = logging.getLogger(__name__)

UPDATE_TIME_DEFAULT_WEIGHT = 0.0
PULL_COUNT_DEFAULT_WEIGHT = 1.0
TAGS_COUNT_DEFAULT_WEIGHT = 1.0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Inputs, matched weights and result of scoring one repository."""
    repo_id: int
    age_days: float
    pull_count: int
    tags_count: int
    update_base: float
    update_weight: float
    pull_base: float
    pull_weight: float
    tags_base: float
    tags_weight: float
    update_defaulted: bool = False
    pull_defaulted: bool = False
    tags_defaulted: bool = False

    @property
    def score(self) -> float:
        return (
            self.update_base * self.update_weight
            + self.pull_base * self.pull_weight
            + self.tags_base * self.tags_weight
        )

    def describe(self) -> str:
        """One-line audit record of the computation."""
        return (
            "score = UpdateTimeBase*uf + PullCountBase*pf + TagsCountBase*tf = "
            f"{self.update_base:.2f} * {self.update_weight:.2f} + "
            f"{self.pull_base:.2f} * {self.pull_weight:.2f} + "
            f"{self.tags_base:.2f} * {self.tags_weight:.2f} = {self.score:.2f}   "
            f"repo_id: {self.repo_id}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repo_id': self.repo_id,
            'age_days': self.age_days,
            'pull_count': self.pull_count,
            'tags_count': self.tags_count,
            'weights': {
                'update_time': self.update_weight,
                'pull_count': self.pull_weight,
                'tags_count': self.tags_weight,
            },
            'defaulted': {
                'update_time': self.update_defaulted,
                'pull_count': self.pull_defaulted,
                'tags_count': self.tags_defaulted,
            },
            'score': self.score,
        }


def explain(repo: RepoCandidate, policy: RetentionPolicy, now: datetime) -> ScoreBreakdown:
    """
    Compute the score breakdown for a repository.

    The age in days is fractional internally and truncated toward zero for
    bucket matching, so an update less than a day in the future counts as
    age 0.

    Args:
        repo: Repository snapshot
        policy: Retention policy
        now: Reference time for the age computation

    Returns:
        ScoreBreakdown with every intermediate value
    """
    age_days = days_between(repo.update_time, now) if repo.update_time else 0.0
    age_bucket = int(age_days)

    update_weight = policy.update_time.match(age_bucket)
    update_defaulted = update_weight is None
    if update_defaulted:
        logger.debug(f"Out of range: day = {age_days:.2f}, uf is {UPDATE_TIME_DEFAULT_WEIGHT}")
        update_weight = UPDATE_TIME_DEFAULT_WEIGHT

    pull_weight = policy.pull_count.match(repo.pull_count)
    pull_defaulted = pull_weight is None
    if pull_defaulted:
        logger.debug(f"Out of range: pull_count = {repo.pull_count}, pf is {PULL_COUNT_DEFAULT_WEIGHT}")
        pull_weight = PULL_COUNT_DEFAULT_WEIGHT

    tags_weight = policy.tags_count.match(repo.tags_count)
    tags_defaulted = tags_weight is None
    if tags_defaulted:
        logger.debug(f"Out of range: tags_count = {repo.tags_count}, tf is {TAGS_COUNT_DEFAULT_WEIGHT}")
        tags_weight = TAGS_COUNT_DEFAULT_WEIGHT

    return ScoreBreakdown(
        repo_id=repo.id,
        age_days=age_days,
        pull_count=repo.pull_count,
        tags_count=repo.tags_count,
        update_base=policy.update_time.base,
        update_weight=update_weight,
        pull_base=policy.pull_count.base,
        pull_weight=pull_weight,
        tags_base=policy.tags_count.base,
        tags_weight=tags_weight,
        update_defaulted=update_defaulted,
        pull_defaulted=pull_defaulted,
        tags_defaulted=tags_defaulted,
    )


def score(repo: RepoCandidate, policy: RetentionPolicy, now: Optional[datetime] = None) -> float:
    """Score a repository and log the breakdown."""
    breakdown = explain(repo, policy, now or datetime.now(timezone.utc))
    logger.info(f"[factors] ==> {breakdown.describe()}")
    return breakdown.score


def score_candidates(
    repos: Iterable[RepoCandidate],
    policy: RetentionPolicy,
    now: Optional[datetime] = None
) -> List[RepoCandidate]:
    """
    Attach a score to every repository.

    All repositories are scored against the same reference time.
    """
    now = now or datetime.now(timezone.utc)
    return [repo.with_score(score(repo, policy, now)) for repo in repos]
