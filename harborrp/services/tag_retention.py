"""
Tag retention service for harborrp.

For each repository, tags are handled in two phases:

1. Partition by age. Tags at most ``day`` days old are kept unconditionally.
   Older tags become eviction candidates on a min-heap ordered by creation
   time, then tag name.
2. Evict by count. While more than ``max_keep`` candidates remain, the oldest
   is deleted (or, in dry-run mode, reported as "would delete").

Repositories are processed one after another. The first fatal error
(network failure, malformed timestamp) stops the whole run; the report keeps
what happened up to and including the failing repository.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generator, Iterable, List, Optional, Tuple

from ..domain import TagCandidate
from ..exit_codes import CommandError, EmptyHeapError
from ..infra import HarborClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagDecision:
    """Age classification of one tag."""
    tag: TagCandidate
    age_days: float
    evictable: bool


class TagEvictionHeap:
    """Min-heap of eviction candidates, oldest first, ties broken by name."""

    def __init__(self, tags: Iterable[TagCandidate] = ()):
        self._entries: List[Tuple[datetime, str, int, TagCandidate]] = []
        self._counter = itertools.count()
        for tag in tags:
            self.push(tag)

    def push(self, tag: TagCandidate) -> None:
        heapq.heappush(self._entries, (tag.created_at, tag.name, next(self._counter), tag))

    def pop(self) -> TagCandidate:
        """
        Remove and return the oldest candidate.

        Raises:
            EmptyHeapError: If the heap is empty
        """
        if not self._entries:
            raise EmptyHeapError("pop from an empty tag eviction heap")
        return heapq.heappop(self._entries)[-1]

    def oldest(self, n: int) -> List[TagCandidate]:
        """The ``n`` oldest candidates in pop order, without removing them."""
        return [entry[-1] for entry in heapq.nsmallest(n, self._entries)]

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


@dataclass
class TagPartition:
    """Result of the age phase for one repository."""
    decisions: List[TagDecision] = field(default_factory=list)
    retained: List[TagCandidate] = field(default_factory=list)
    candidates: TagEvictionHeap = field(default_factory=TagEvictionHeap)


def partition_tags(tags: Iterable[TagCandidate], day: int, now: datetime) -> TagPartition:
    """
    Split tags into retained ones and eviction candidates.

    A tag is retained when its fractional age is at most ``day`` days.
    """
    partition = TagPartition()
    for tag in tags:
        age = tag.age_days(now)
        evictable = age > day
        partition.decisions.append(TagDecision(tag, age, evictable))
        if evictable:
            partition.candidates.push(tag)
        else:
            partition.retained.append(tag)
    return partition


def evict_tags(
    candidates: TagEvictionHeap,
    max_keep: int,
    delete: Callable[[TagCandidate], Any],
    dry_run: bool = False,
) -> List[TagCandidate]:
    """
    Evict the oldest candidates until at most ``max_keep`` remain.

    In dry-run mode nothing is popped and ``delete`` is never called; the
    return value lists what would be deleted.

    Returns:
        Tags deleted (or that would be deleted), oldest first
    """
    excess = max(0, len(candidates) - max_keep)
    if dry_run:
        return candidates.oldest(excess)

    evicted = []
    remaining = len(candidates)
    while remaining > max_keep:
        tag = candidates.pop()
        delete(tag)
        evicted.append(tag)
        remaining -= 1
    return evicted


@dataclass
class TagRetentionOptions:
    """Options for a tag retention run."""
    day: int
    max_keep: int
    repo_name: str = ''
    dry_run: bool = False


@dataclass
class RepositoryTagOutcome:
    """What happened to one repository's tags."""
    repository: str
    tags_count: int = 0
    decisions: List[TagDecision] = field(default_factory=list)
    retained: int = 0
    candidates: int = 0
    evicted: List[str] = field(default_factory=list)
    remaining_candidates: int = 0
    dry_run: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'repository': self.repository,
            'tags_count': self.tags_count,
            'retained': self.retained,
            'candidates': self.candidates,
            'remaining_candidates': self.remaining_candidates,
            'error': self.error,
        }
        data['would_delete' if self.dry_run else 'deleted'] = self.evicted
        return data


@dataclass
class TagRetentionReport:
    """Outcome of a whole tag retention run."""
    options: TagRetentionOptions
    repositories: List[RepositoryTagOutcome] = field(default_factory=list)
    failed_repository: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failed_repository is None

    @property
    def evicted_count(self) -> int:
        return sum(len(outcome.evicted) for outcome in self.repositories)


class TagRetentionService:
    """
    Applies age/count tag retention across repositories.

    Example:
        service = TagRetentionService(client)
        options = TagRetentionOptions(day=30, max_keep=5, dry_run=True)

        for outcome in service.run(options):
            print(outcome.repository, outcome.evicted)

        report = service.last_report
    """

    def __init__(self, client: HarborClient, now: Optional[datetime] = None):
        """
        Initialize TagRetentionService.

        Args:
            client: Harbor client used for search, tag listing and deletion
            now: Reference time for tag ages (defaults to the run start)
        """
        self.client = client
        self.now = now
        self.last_report: Optional[TagRetentionReport] = None

    def process_repository(
        self,
        repository: str,
        options: TagRetentionOptions,
        now: datetime
    ) -> RepositoryTagOutcome:
        """
        Run both phases for one repository.

        Raises:
            NetworkError: If listing or deleting tags fails
            TimestampParseError: If a tag has a malformed creation time
        """
        tags = self.client.list_tags(repository)
        partition = partition_tags(tags, options.day, now)

        outcome = RepositoryTagOutcome(
            repository=repository,
            tags_count=len(tags),
            decisions=partition.decisions,
            retained=len(partition.retained),
            candidates=len(partition.candidates),
            dry_run=options.dry_run,
        )

        evicted = evict_tags(
            partition.candidates,
            options.max_keep,
            delete=lambda tag: self.client.delete_tag(repository, tag.name),
            dry_run=options.dry_run,
        )
        outcome.evicted = [tag.name for tag in evicted]
        outcome.remaining_candidates = len(partition.candidates)

        if evicted:
            verb = "would delete" if options.dry_run else "deleted"
            logger.info(f"{repository}: {verb} {', '.join(outcome.evicted)}")
        return outcome

    def run(
        self,
        options: TagRetentionOptions
    ) -> Generator[RepositoryTagOutcome, None, TagRetentionReport]:
        """
        Apply tag retention to every matching repository.

        Yields one outcome per repository as it completes.

        Raises:
            CommandError: The first fatal error; ``last_report.failed_repository``
                names the repository being processed, if any
        """
        report = TagRetentionReport(options=options)
        self.last_report = report
        now = self.now or datetime.now(timezone.utc)

        repositories = self.client.search_repositories(options.repo_name)
        logger.info(f"Found {len(repositories)} repositories")

        for repo in repositories:
            name = repo.repository_name
            try:
                outcome = self.process_repository(name, options, now)
            except CommandError as e:
                report.failed_repository = name
                report.repositories.append(RepositoryTagOutcome(
                    repository=name,
                    tags_count=repo.tags_count,
                    dry_run=options.dry_run,
                    error=str(e),
                ))
                raise
            report.repositories.append(outcome)
            yield outcome

        return report
