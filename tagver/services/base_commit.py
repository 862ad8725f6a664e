"""
Base commit resolution for tagver.

Picks the single commit a version derives from:

1. Filter the version tags down to those reachable from HEAD
2. Select one of them according to the lookup policy:
   - MAX: highest version (first seen wins a tie)
   - LATEST: most recently created annotated tag (lightweight tags have no date)
   - NEAREST: smallest distance from HEAD, ties broken by LATEST
3. Measure the distance from HEAD to the selected commit

When no version tag is reachable, deepest_reachable_commit() provides the
fallback: the last commit of the ancestry walk within the depth ceiling.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from ..domain.commit import Commit
from ..domain.policy import LookupPolicy
from ..domain.tag import TagRef, tags_of
from ..exit_codes import ConfigError
from .distance import DistanceCalculator
from .reachability import filter_reachable_tags

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Sorts before any real date
UNKNOWN_DATE = datetime.min.replace(tzinfo=timezone.utc)


class StatefulMax(Generic[T]):
    """
    Running maximum over a stream of items.

    Each item's key is computed once. A new item replaces the current best
    only when its key is strictly greater, so the first seen item wins ties.
    """

    def __init__(self, key: Callable[[T], object]):
        self.key = key
        self.best: Optional[T] = None
        self._best_key = None
        self._seen = False

    def offer(self, item: T) -> T:
        item_key = self.key(item)
        if not self._seen or item_key > self._best_key:
            self.best = item
            self._best_key = item_key
            self._seen = True
        return self.best

    def fold(self, items: Iterable[T]) -> Optional[T]:
        for item in items:
            self.offer(item)
        return self.best


class TagDateExtractor:
    """
    Scoped lookup of tag creation dates.

    Dates are cached for the lifetime of the extractor only; use it as a
    context manager so the lookups are released right after a selection.
    """

    def __init__(self, repository):
        self.repository = repository
        self._dates: Dict[str, datetime] = {}

    def __enter__(self) -> 'TagDateExtractor':
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def close(self) -> None:
        self._dates.clear()

    def date_of(self, tag: TagRef) -> datetime:
        if tag.ref_name not in self._dates:
            date = self.repository.tag_date(tag)
            if date is not None and date.tzinfo is None:
                date = date.replace(tzinfo=timezone.utc)
            self._dates[tag.ref_name] = date or UNKNOWN_DATE
        return self._dates[tag.ref_name]


def deepest_reachable_commit(repository, head_id: str, max_depth: Optional[int] = None) -> Commit:
    """
    Walk ancestry from HEAD and return the last commit within max_depth.

    Args:
        repository: Repository accessor providing rev_walk()
        head_id: Commit to start from
        max_depth: Maximum distance from HEAD (None for the whole history)

    Returns:
        Commit without tags; its distance never exceeds max_depth
    """
    depth = 0
    last_id = head_id
    with repository.rev_walk(head_id) as walk:
        for commit in walk:
            if max_depth is not None and depth > max_depth:
                break
            last_id = commit.id
            depth += 1

    # HEAD itself is not counted
    distance = max(depth - 1, 0)
    logger.debug(f"Deepest reachable commit {last_id[:8]} at distance {distance}")
    return Commit(last_id, distance)


class BaseCommitResolver:
    """
    Selects the base commit among reachable version tags.

    Example:
        resolver = BaseCommitResolver(repository, LookupPolicy.NEAREST, strategy)
        base = resolver.resolve(head_id, sets.all_version,
                                sets.all_version_annotated, sets.all_version_lightweight)
        if base is None:
            base = deepest_reachable_commit(repository, head_id)
    """

    def __init__(self, repository, policy, strategy, max_depth: Optional[int] = None):
        """
        Args:
            repository: Repository accessor (rev_walk, tag_date)
            policy: LookupPolicy or its name; unknown values raise ConfigError
            strategy: Version strategy providing version_from_tag()
            max_depth: Depth ceiling for the final distance computation
        """
        self.repository = repository
        self.policy = LookupPolicy.parse(policy)
        self.strategy = strategy
        self.max_depth = max_depth

    def resolve(
        self,
        head_id: str,
        all_version_tags: List[TagRef],
        annotated_version_tags: List[TagRef],
        lightweight_version_tags: List[TagRef]
    ) -> Optional[Commit]:
        """
        Resolve the base commit.

        Returns:
            The base Commit, or None when no reachable version tag qualifies
            (or the selected one lies beyond the depth ceiling)
        """
        reachable = filter_reachable_tags(self.repository, head_id, all_version_tags)

        if self.policy is LookupPolicy.LATEST:
            reachable = [tag for tag in reachable if tag.annotated]

        selected = self.select(head_id, reachable)
        if selected is None:
            logger.debug("No reachable version tag found")
            return None

        base_id = selected.target
        annotated = tags_of(annotated_version_tags, base_id)
        lightweight = tags_of(lightweight_version_tags, base_id)
        logger.debug(f"Base tag {selected.name} selected with {self.policy.value} policy")

        if base_id == head_id:
            return Commit(head_id, 0, annotated, lightweight)

        with DistanceCalculator.create(head_id, self.repository, self.max_depth) as calculator:
            distance = calculator.distance_to(base_id)

        if distance is None:
            logger.debug(f"Base commit {base_id[:8]} is beyond the depth ceiling")
            return None
        return Commit(base_id, distance, annotated, lightweight)

    def select(self, head_id: str, reachable: List[TagRef]) -> Optional[TagRef]:
        """Apply the lookup policy to the reachable tags."""
        if self.policy is LookupPolicy.MAX:
            return StatefulMax(self.strategy.version_from_tag).fold(reachable)
        if self.policy is LookupPolicy.LATEST:
            return self.latest(reachable)
        if self.policy is LookupPolicy.NEAREST:
            return self.nearest(head_id, reachable)
        raise ConfigError(f"[{self.policy}] lookup policy is not implemented")

    def latest(self, tags: List[TagRef]) -> Optional[TagRef]:
        with TagDateExtractor(self.repository) as extractor:
            return StatefulMax(extractor.date_of).fold(tags)

    def nearest(self, head_id: str, tags: List[TagRef]) -> Optional[TagRef]:
        by_distance: Dict[int, List[TagRef]] = defaultdict(list)
        with DistanceCalculator.create(head_id, self.repository) as calculator:
            for tag in tags:
                distance = calculator.distance_to(tag.target)
                if distance is None:
                    logger.warning(f"Tag {tag.name} is reachable but has no distance from HEAD")
                    continue
                by_distance[distance].append(tag)

        if not by_distance:
            return None

        closest = by_distance[min(by_distance)]
        if len(closest) == 1:
            return closest[0]
        # same distance: the most recent one wins
        return self.latest(closest)
