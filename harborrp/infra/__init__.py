"""
Infrastructure layer for harborrp.

Contains abstractions for external systems:
- HarborClient: Harbor REST API access
- SessionStore: Session cookie persistence

These provide clean interfaces that can be mocked for testing.
"""

from .harbor_client import HarborClient, Statistics, SearchRepository
from .session_store import SessionStore

__all__ = [
    'HarborClient',
    'Statistics',
    'SearchRepository',
    'SessionStore',
]
