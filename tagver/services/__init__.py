"""
Service layer for tagver.

Contains the version-resolution logic that orchestrates domain objects and
the git client:
- classify: Partition tags into the twelve tag sets
- filter_reachable_tags: Keep tags reachable from HEAD
- DistanceCalculator: Bounded, resumable commit distances
- BaseCommitResolver: Pick the base commit by lookup policy
- VersionCalculator: End-to-end computation with caching

Services are the primary API for commands to use.
"""

from .tag_classifier import TagSets, classify, signature, SIGNATURE_MEMBERSHIP
from .reachability import filter_reachable_tags, index_by_target
from .distance import DistanceCalculator
from .base_commit import BaseCommitResolver, StatefulMax, TagDateExtractor, deepest_reachable_commit
from .calculator import VersionCalculator

__all__ = [
    'TagSets',
    'classify',
    'signature',
    'SIGNATURE_MEMBERSHIP',
    'filter_reachable_tags',
    'index_by_target',
    'DistanceCalculator',
    'BaseCommitResolver',
    'StatefulMax',
    'TagDateExtractor',
    'deepest_reachable_commit',
    'VersionCalculator',
]
