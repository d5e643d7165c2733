"""
Harbor API client infrastructure for harborrp.

Provides the handful of Harbor REST calls the retention engine needs:
- Registry statistics and the "top" repository listing
- Repository search (all repositories when the query is empty)
- Tag listing for a repository
- Repository and tag deletion (soft deletion; GC runs out of band)

Authenticated calls send the ``beegosessionID`` cookie from the session store.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from ..domain import RepoCandidate, TagCandidate
from ..exit_codes import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@dataclass
class Statistics:
    """Project and repository counters from ``/api/statistics``."""
    private_project_count: int = 0
    private_repo_count: int = 0
    public_project_count: int = 0
    public_repo_count: int = 0
    total_project_count: int = 0
    total_repo_count: int = 0

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Statistics':
        return cls(
            private_project_count=int(data.get('private_project_count', 0)),
            private_repo_count=int(data.get('private_repo_count', 0)),
            public_project_count=int(data.get('public_project_count', 0)),
            public_repo_count=int(data.get('public_repo_count', 0)),
            total_project_count=int(data.get('total_project_count', 0)),
            total_repo_count=int(data.get('total_repo_count', 0)),
        )


@dataclass
class SearchRepository:
    """A repository entry from ``/api/search``."""
    project_name: str
    repository_name: str
    project_id: int = 0
    project_public: bool = False
    pull_count: int = 0
    tags_count: int = 0

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'SearchRepository':
        return cls(
            project_name=data.get('project_name', ''),
            repository_name=data.get('repository_name', ''),
            project_id=int(data.get('project_id', 0)),
            project_public=bool(data.get('project_public', False)),
            pull_count=int(data.get('pull_count', 0)),
            tags_count=int(data.get('tags_count', 0)),
        )


class HarborClient:
    """
    Harbor REST client.

    Errors are never swallowed: any transport failure or non-2xx status
    raises NetworkError and the caller decides whether it is fatal.

    Example:
        client = HarborClient("https://harbor.example.com", session_id="...")
        stats = client.get_statistics()
        for repo in client.top_repositories(stats.public_repo_count):
            print(repo.name)
    """

    def __init__(
        self,
        base_url: str,
        session_id: Optional[str] = None,
        lang: str = 'zh-cn',
        timeout: int = DEFAULT_TIMEOUT,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HarborClient.

        Args:
            base_url: Harbor root URL (e.g., https://harbor.example.com)
            session_id: ``beegosessionID`` cookie value for authenticated calls
            lang: UI language sent in the ``harbor-lang`` cookie
            timeout: HTTP request timeout in seconds
            verify: Verify TLS certificates
            session: Preconfigured requests session (mainly for tests)
        """
        self.base_url = base_url.rstrip('/')
        self.session_id = session_id
        self.lang = lang
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = verify
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': 'harborrp',
        })

    @classmethod
    def from_config(cls, config: Dict[str, Any], session_id: Optional[str] = None) -> 'HarborClient':
        """Create a client from the ``harbor`` config section."""
        harbor = config.get('harbor', {})
        return cls(
            base_url=harbor.get('url', 'http://localhost'),
            session_id=session_id,
            lang=harbor.get('lang', 'zh-cn'),
            timeout=harbor.get('timeout_seconds', DEFAULT_TIMEOUT),
            verify=harbor.get('verify_tls', True),
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _cookie_headers(self, authenticated: bool) -> Dict[str, str]:
        if not authenticated or not self.session_id:
            return {}
        return {'Cookie': f"harbor-lang={self.lang}; beegosessionID={self.session_id}"}

    def _request(self, method: str, path: str, authenticated: bool = True,
                 params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = self.url(path)
        logger.info(f"==> {method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                headers=self._cookie_headers(authenticated),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _get_json(self, path: str, authenticated: bool = True,
                  params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._request('GET', path, authenticated=authenticated, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"GET {self.url(path)} returned invalid JSON: {e}") from e

    def get_statistics(self) -> Statistics:
        """Fetch registry counters."""
        data = self._get_json('/api/statistics')
        return Statistics.from_api_response(data or {})

    def top_repositories(self, count: int) -> List[RepoCandidate]:
        """
        Fetch the top ``count`` repositories.

        Raises:
            NetworkError: On request failure
            TimestampParseError: If an ``update_time`` is malformed
        """
        data = self._get_json('/api/repositories/top', params={'count': count})
        return [RepoCandidate.from_api_response(item) for item in data or []]

    def search_repositories(self, query: str = '') -> List[SearchRepository]:
        """
        Search repositories by name; an empty query returns all of them.

        Search is the one call made without the session cookie.
        """
        data = self._get_json('/api/search', authenticated=False, params={'q': query})
        return [SearchRepository.from_api_response(item) for item in (data or {}).get('repository') or []]

    def list_tags(self, repo_name: str) -> List[TagCandidate]:
        """
        List tags of a repository.

        Raises:
            NetworkError: On request failure
            TimestampParseError: If a ``created`` timestamp is malformed
        """
        data = self._get_json(f"/api/repositories/{quote(repo_name, safe='/')}/tags")
        return [TagCandidate.from_api_response(item) for item in data or []]

    def delete_repository(self, repo_name: str) -> int:
        """Soft-delete a repository. Returns the HTTP status code."""
        response = self._request('DELETE', f"/api/repositories/{quote(repo_name, safe='/')}")
        logger.info(f"<== {response.status_code}")
        return response.status_code

    def delete_tag(self, repo_name: str, tag_name: str) -> int:
        """Soft-delete one tag of a repository. Returns the HTTP status code."""
        response = self._request(
            'DELETE',
            f"/api/repositories/{quote(repo_name, safe='/')}/tags/{quote(tag_name, safe='')}",
        )
        logger.info(f"<== {response.status_code}")
        return response.status_code
