"""
Commit distance calculation for tagver.

Distance is the minimal number of parent links followed from a source
commit to reach an ancestor. The calculator runs a breadth-first search
whose state (frontier and every distance found so far) persists across
queries, so asking for several targets from the same source walks history
only once. Parent links are pulled lazily from a RevWalk, which the
calculator owns and releases on close().
"""

import logging
from collections import deque
from typing import Deque, Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class DistanceCalculator:
    """
    Bounded, resumable breadth-first distance search.

    Example:
        with DistanceCalculator.create(head_id, repository, max_depth=100) as dc:
            dc.distance_to(tag.target)   # -> 3
            dc.distance_to(other_id)     # -> None when beyond 100 edges
    """

    def __init__(self, repository, from_id: str, max_depth: Optional[int] = None):
        """
        Args:
            repository: Repository accessor providing rev_walk()
            from_id: Commit distances are measured from
            max_depth: Maximum number of edges to follow (None for unbounded)
        """
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.repository = repository
        self.from_id = from_id
        self.max_depth = max_depth

        self._walk = None
        self._commits: Optional[Iterator] = None
        self._walk_exhausted = False
        self._parents: Dict[str, Tuple[str, ...]] = {}
        self._distances: Dict[str, int] = {from_id: 0}
        self._queue: Deque[str] = deque([from_id])

    @classmethod
    def create(cls, from_id: str, repository, max_depth: Optional[int] = None) -> 'DistanceCalculator':
        return cls(repository, from_id, max_depth)

    def __enter__(self) -> 'DistanceCalculator':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def close(self) -> None:
        if self._walk is not None:
            self._walk.close()
            self._walk = None
            self._commits = None

    def _parents_of(self, commit_id: str) -> Tuple[str, ...]:
        """Parents of a commit, reading the walk forward until it shows up."""
        if commit_id in self._parents:
            return self._parents[commit_id]
        if self._walk_exhausted:
            return ()

        if self._walk is None:
            self._walk = self.repository.rev_walk(self.from_id)
            self._commits = iter(self._walk)

        for commit in self._commits:
            self._parents[commit.id] = commit.parents
            if commit.id == commit_id:
                return commit.parents

        self._walk_exhausted = True
        self.close()
        return ()

    def distance_to(self, to_id: str) -> Optional[int]:
        """
        Distance from the source commit to to_id.

        Returns:
            Number of edges, 0 for the source itself, or None when to_id is
            not an ancestor within max_depth edges
        """
        if to_id in self._distances:
            return self._distances[to_id]

        while self._queue:
            current = self._queue.popleft()
            depth = self._distances[current]
            if self.max_depth is not None and depth >= self.max_depth:
                continue

            for parent in self._parents_of(current):
                if parent not in self._distances:
                    self._distances[parent] = depth + 1
                    self._queue.append(parent)

            if to_id in self._distances:
                return self._distances[to_id]

        logger.debug(f"{to_id[:8]} not reachable from {self.from_id[:8]} within {self.max_depth} edges")
        return None
