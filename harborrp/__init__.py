"""
harborrp - Retention policies for Harbor registries.

harborrp decides which repositories, and which tags within a repository,
should be deleted, based on a weighted retention policy file.

Quick Start:
    from datetime import datetime, timezone
    import harborrp

    policy = harborrp.load_policy("rp.yaml")
    client = harborrp.HarborClient("https://harbor.example.com", session_id="...")

    # Rank repositories, lowest score first
    analysis = harborrp.analyse_repositories(client, policy)
    for repo in analysis.ranking.listing:
        print(repo.score, repo.name)

    # Preview tag retention
    service = harborrp.TagRetentionService(client)
    options = harborrp.TagRetentionOptions(day=30, max_keep=5, dry_run=True)
    for outcome in service.run(options):
        print(outcome.repository, outcome.evicted)

Domain Objects:
    RepoCandidate - Repository considered for deletion
    TagCandidate - Tag with its creation time
    RetentionPolicy - Weighted factor buckets

Services:
    score / explain - Repository scoring
    Ranking / RankingHeap - Ordered deletion candidates
    EvictionController - Interactive bounded deletion
    TagRetentionService - Age/count tag eviction
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    RepoCandidate,
    TagCandidate,
    RetentionPolicy,
    FactorSpec,
    FactorBucket,
)

# Infrastructure
from .infra import HarborClient, SessionStore

# Services
from .services import (
    score,
    explain,
    Ranking,
    RankingHeap,
    EvictionController,
    TagRetentionOptions,
    TagRetentionService,
    analyse_repositories,
)

# Policy and configuration
from .policy import load_policy
from .config import load_config

__all__ = [
    "__version__",
    "RepoCandidate",
    "TagCandidate",
    "RetentionPolicy",
    "FactorSpec",
    "FactorBucket",
    "HarborClient",
    "SessionStore",
    "score",
    "explain",
    "Ranking",
    "RankingHeap",
    "EvictionController",
    "TagRetentionOptions",
    "TagRetentionService",
    "analyse_repositories",
    "load_policy",
    "load_config",
]
