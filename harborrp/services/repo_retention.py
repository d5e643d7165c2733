"""
Repository retention analysis for harborrp.

Fetches every public repository, scores it against the policy and builds
the ranking used both for the suggestion listing and for deletion.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..domain import RetentionPolicy
from ..infra import HarborClient, Statistics
from .ranking import Ranking
from .scoring import score_candidates

logger = logging.getLogger(__name__)


@dataclass
class RepoAnalysis:
    """Run-scoped context of one repository analysis."""
    statistics: Statistics
    policy: RetentionPolicy
    ranking: Ranking
    now: datetime


def analyse_repositories(
    client: HarborClient,
    policy: RetentionPolicy,
    now: Optional[datetime] = None
) -> RepoAnalysis:
    """
    Score all public repositories.

    Raises:
        NetworkError: If statistics or the repository listing cannot be fetched
        TimestampParseError: If a repository has a malformed update time
    """
    now = now or datetime.now(timezone.utc)

    statistics = client.get_statistics()
    repos = client.top_repositories(statistics.public_repo_count)
    scored = score_candidates(repos, policy, now)
    logger.debug(f"Scored {len(scored)} repositories")

    return RepoAnalysis(
        statistics=statistics,
        policy=policy,
        ranking=Ranking.build(scored),
        now=now,
    )
