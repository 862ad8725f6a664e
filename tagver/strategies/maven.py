"""
Maven-compatible version strategy.

Released commits (a clean HEAD with an annotated version tag) get the tag
version. Everything else is a SNAPSHOT of the next version:

    1.0.0 tagged, 2 commits later on master  -> 1.0.1-SNAPSHOT
    1.1.0 lightweight tag, on branch feat/x  -> 1.1.0-feat_x-SNAPSHOT

A lightweight tag marks a version that is not released yet, so its patch
number is not incremented.
"""

from typing import Sequence

from ..domain.commit import Commit
from ..domain.version import SNAPSHOT, Version
from .base import VersionStrategy


class MavenVersionStrategy(VersionStrategy):

    OPTIONS = ('force_computation', 'use_dirty')

    def __init__(self, naming, repository, metadatas, force_computation: bool = False, use_dirty: bool = False):
        super().__init__(naming, repository, metadatas)
        self.force_computation = force_computation
        self.use_dirty = use_dirty

    def build(self, head: Commit, base_commits: Sequence[Commit]) -> Version:
        base = self.single_base(base_commits)
        dirty = self.is_dirty()
        base_version, base_tag = self.base_version(base)
        branch = self.branch_qualifier()

        head_tag = self.max_version_tag(head.annotated_tags)
        if head_tag is not None and not dirty and not self.force_computation:
            version = self.version_from_tag(head_tag)
        else:
            version = base_version.remove_qualifier(SNAPSHOT)
            if base_tag is None or base_tag.annotated:
                version = version.increment_patch()
            version = version.add_qualifier(branch)
            if self.use_dirty and dirty:
                version = version.add_qualifier('dirty')
            version = version.add_qualifier(SNAPSHOT)

        self.register_current_version(version.major, version.minor, version.patch)
        return version
