"""
Domain layer for harborrp.

Contains pure domain objects with no I/O or side effects:
- RepoCandidate: A repository considered for deletion, with its score
- TagCandidate: A tag of a repository with its creation time
- RetentionPolicy: Weighted factor buckets used to score repositories

These objects are immutable and provide serialization methods for output.
"""

from .repository import RepoCandidate
from .tag import TagCandidate, parse_timestamp
from .policy import RetentionPolicy, FactorSpec, FactorBucket

__all__ = [
    'RepoCandidate',
    'TagCandidate',
    'parse_timestamp',
    'RetentionPolicy',
    'FactorSpec',
    'FactorBucket',
]
