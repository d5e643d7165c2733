"""
Service layer for harborrp.

Contains the retention decision logic:
- scoring: Weighted-factor repository scores
- ranking: Min-heap ranking with a stable listing view
- eviction: Interactive, bounded repository deletion
- tag_retention: Two-phase age/count tag eviction
- repo_retention: Repository analysis run

Services are the primary API for commands to use.
"""

from .scoring import ScoreBreakdown, explain, score, score_candidates
from .ranking import Ranking, RankingHeap
from .eviction import EvictionController, EvictionResult, SelectionState, validate_batch_size
from .tag_retention import (
    TagEvictionHeap,
    TagRetentionOptions,
    TagRetentionReport,
    TagRetentionService,
    RepositoryTagOutcome,
    evict_tags,
    partition_tags,
)
from .repo_retention import RepoAnalysis, analyse_repositories

__all__ = [
    'ScoreBreakdown',
    'explain',
    'score',
    'score_candidates',
    'Ranking',
    'RankingHeap',
    'EvictionController',
    'EvictionResult',
    'SelectionState',
    'validate_batch_size',
    'TagEvictionHeap',
    'TagRetentionOptions',
    'TagRetentionReport',
    'TagRetentionService',
    'RepositoryTagOutcome',
    'evict_tags',
    'partition_tags',
    'RepoAnalysis',
    'analyse_repositories',
]
