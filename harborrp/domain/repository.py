"""
Repository domain object for harborrp.

RepoCandidate represents a public Harbor repository that may be deleted.
It is immutable; the score is attached once per analysis run.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from .tag import parse_timestamp


@dataclass(frozen=True)
class RepoCandidate:
    """
    A repository considered for deletion.

    Identity is ``id``; ``name`` (``project/repo``) is only used to address
    deletion requests.
    """

    id: int
    name: str
    project_id: int = 0
    pull_count: int = 0
    tags_count: int = 0
    update_time: Optional[datetime] = None
    score: Optional[float] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'RepoCandidate':
        """
        Create from a ``/api/repositories/top`` entry.

        Raises:
            TimestampParseError: If ``update_time`` is malformed
        """
        return cls(
            id=int(data.get('id', 0)),
            name=data.get('name', ''),
            project_id=int(data.get('project_id', 0)),
            pull_count=int(data.get('pull_count', 0)),
            tags_count=int(data.get('tags_count', 0)),
            update_time=parse_timestamp(data.get('update_time', '')),
        )

    def with_score(self, score: float) -> 'RepoCandidate':
        """Return a copy carrying the computed score."""
        return replace(self, score=score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'project_id': self.project_id,
            'pull_count': self.pull_count,
            'tags_count': self.tags_count,
            'update_time': self.update_time.isoformat() if self.update_time else None,
            'score': self.score,
        }
