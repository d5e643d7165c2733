"""
Shared fixtures for harborrp tests.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from harborrp.infra import HarborClient

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time for age computations."""
    return NOW


@pytest.fixture
def iso_days_ago():
    """Build an RFC 3339 timestamp ``days`` days before NOW."""
    def _iso(days: float) -> str:
        return (NOW - timedelta(days=days)).strftime('%Y-%m-%dT%H:%M:%SZ')
    return _iso


@pytest.fixture
def make_response():
    """Build a stand-in for requests.Response."""
    def _response(status_code: int = 200, payload=None):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        return response
    return _response


@pytest.fixture
def http():
    """Mocked requests.Session; set ``http.request`` behaviour per test."""
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def client(http):
    return HarborClient("https://harbor.example.com", session_id="abc123", session=http)
