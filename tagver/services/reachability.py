"""
Reachable-tag filtering for tagver.

Keeps only the tags whose target is HEAD or one of its ancestors. Tags are
indexed by target once, then a single ancestry walk collects them, which
avoids walking history once per tag.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from ..domain.tag import TagRef

logger = logging.getLogger(__name__)


def index_by_target(tags: Iterable[TagRef]) -> Dict[str, List[TagRef]]:
    """Group tags by the commit id they target, keeping input order."""
    by_target: Dict[str, List[TagRef]] = defaultdict(list)
    for tag in tags:
        by_target[tag.target].append(tag)
    return dict(by_target)


def filter_reachable_tags(repository, head_id: str, candidate_tags: Iterable[TagRef]) -> List[TagRef]:
    """
    Filter tags down to those reachable from a commit.

    Args:
        repository: Repository accessor providing rev_walk()
        head_id: Commit the walk starts from
        candidate_tags: Tags to filter (already peeled)

    Returns:
        Reachable tags in walk order; tags sharing a commit keep their input order

    Raises:
        GitCommandError: If head_id cannot be walked
    """
    tagged_commits = index_by_target(candidate_tags)
    reachable: List[TagRef] = []
    if not tagged_commits:
        return reachable

    remaining = len(tagged_commits)
    with repository.rev_walk(head_id) as walk:
        for commit in walk:
            tags = tagged_commits.get(commit.id)
            if tags:
                reachable.extend(tags)
                remaining -= 1
                if remaining == 0:
                    # every tagged commit has been seen
                    break

    logger.debug(f"{len(reachable)} reachable tags from {head_id[:8]}")
    return reachable
