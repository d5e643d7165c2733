"""
Ranking of scored repositories for harborrp.

RankingHeap is a min-heap ordered by score, then by repository id, so equal
scores always come out in the same order.

A Ranking is built once per analysis run and holds two independent views of
the same scored set:
- listing: an immutable ascending tuple used for reports
- heap: an owned RankingHeap consumed by the eviction controller

Popping the heap never changes the listing.
"""

import heapq
import itertools
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..domain import RepoCandidate
from ..exit_codes import EmptyHeapError


def ranking_key(candidate: RepoCandidate) -> Tuple[float, int]:
    """Sort key shared by the heap and the listing."""
    if candidate.score is None:
        raise ValueError(f"Repository {candidate.id} has not been scored")
    return (candidate.score, candidate.id)


class RankingHeap:
    """
    Min-heap of scored repositories.

    Example:
        heap = RankingHeap(scored)
        lowest = heap.pop()
    """

    def __init__(self, candidates: Iterable[RepoCandidate] = ()):
        self._entries: List[Tuple[float, int, int, RepoCandidate]] = []
        self._counter = itertools.count()
        for candidate in candidates:
            self.push(candidate)

    def push(self, candidate: RepoCandidate) -> None:
        score, repo_id = ranking_key(candidate)
        heapq.heappush(self._entries, (score, repo_id, next(self._counter), candidate))

    def pop(self) -> RepoCandidate:
        """
        Remove and return the lowest-ranked repository.

        Raises:
            EmptyHeapError: If the heap is empty
        """
        if not self._entries:
            raise EmptyHeapError("pop from an empty ranking heap")
        return heapq.heappop(self._entries)[-1]

    def drain_ascending(self) -> List[RepoCandidate]:
        """Pop everything in ascending order. Leaves this heap empty."""
        drained = []
        while self._entries:
            drained.append(self.pop())
        return drained

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


@dataclass
class Ranking:
    """Listing and consumption views over one scored candidate set."""
    listing: Tuple[RepoCandidate, ...]
    heap: RankingHeap

    @classmethod
    def build(cls, candidates: Iterable[RepoCandidate]) -> 'Ranking':
        candidates = list(candidates)
        return cls(
            listing=tuple(sorted(candidates, key=ranking_key)),
            heap=RankingHeap(candidates),
        )
