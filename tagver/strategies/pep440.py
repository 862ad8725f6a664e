"""
PEP 440 version strategy for Python packaging.

    clean HEAD tagged v1.2.0             -> 1.2.0
    3 commits after annotated v1.2.0     -> 1.2.1.dev3+g3f2a9c1e
    same with uncommitted changes        -> 1.2.1.dev3+g3f2a9c1e.dirty
    3 commits after lightweight v1.3.0   -> 1.3.0.dev3+g3f2a9c1e

Versions are built and normalized with packaging.version, so the result is
always accepted by pip and build backends.
"""

import logging
from typing import Sequence

from packaging.version import InvalidVersion, Version as Pep440Version

from ..domain.commit import Commit
from .base import VersionStrategy

logger = logging.getLogger(__name__)


class Pep440VersionStrategy(VersionStrategy):

    OPTIONS = ('use_dirty',)

    def __init__(self, naming, repository, metadatas, use_dirty: bool = True):
        super().__init__(naming, repository, metadatas)
        self.use_dirty = use_dirty

    def _tag_release(self, tag) -> Pep440Version:
        extracted = self.naming.extract_version(tag.name)
        try:
            return Pep440Version(extracted)
        except InvalidVersion:
            logger.debug(f"Tag {tag.name} is not PEP 440, using its numeric part")
            return Pep440Version(str(self.version_from_tag(tag).no_qualifier()))

    def build(self, head: Commit, base_commits: Sequence[Commit]) -> Pep440Version:
        base = self.single_base(base_commits)
        dirty = self.is_dirty()
        base_version, base_tag = self.base_version(base)

        head_tag = self.max_version_tag(head.tags)
        if head_tag is not None and not dirty:
            version = self._tag_release(head_tag)
        else:
            release = base_version.no_qualifier()
            if base_tag is None or base_tag.annotated:
                release = release.increment_patch()
            local = f"g{head.id[:8]}"
            if self.use_dirty and dirty:
                local += ".dirty"
            version = Pep440Version(f"{release}.dev{base.distance}+{local}")

        self.register_current_version(version.major, version.minor, version.micro)
        return version
