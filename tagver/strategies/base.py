"""
Version strategy contract and shared helpers.

A strategy decides which tags are version tags, parses a tag into a
comparable Version and builds the final version from the HEAD commit and
the resolved base commit.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple

from ..domain.commit import Commit
from ..domain.metadata import Metadatas, MetadataHolder
from ..domain.tag import TagRef
from ..domain.version import Version
from ..exit_codes import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_FIND_TAG_VERSION_PATTERN = r'v?([0-9]+(?:\.[0-9]+){0,2}(?:-[a-zA-Z0-9\-_]+)?)'
DEFAULT_NON_QUALIFIER_BRANCHES = ('master', 'main')


class VersionNamingConfiguration:
    """
    How tag names map to versions and branch names to qualifiers.

    Args:
        find_tag_version_pattern: Regex matched against the whole short tag
            name; group 1 (or the whole match without groups) is the version
        non_qualifier_branches: Branches that never add a qualifier
    """

    def __init__(
        self,
        find_tag_version_pattern: str = DEFAULT_FIND_TAG_VERSION_PATTERN,
        non_qualifier_branches: Iterable[str] = DEFAULT_NON_QUALIFIER_BRANCHES
    ):
        try:
            self.pattern = re.compile(find_tag_version_pattern)
        except re.error as e:
            raise ConfigError(f"Invalid tag version pattern {find_tag_version_pattern!r}: {e}") from e
        if isinstance(non_qualifier_branches, str):
            non_qualifier_branches = non_qualifier_branches.split(',')
        self.non_qualifier_branches = tuple(b.strip() for b in non_qualifier_branches if b.strip())

    def extract_version(self, tag_name: str) -> Optional[str]:
        match = self.pattern.fullmatch(tag_name)
        if not match:
            return None
        return match.group(1) if self.pattern.groups else match.group(0)

    def branch_qualifier(self, branch: Optional[str]) -> Optional[str]:
        """Qualifier for a branch, None for detached HEAD or non-qualifier branches."""
        if not branch or branch in self.non_qualifier_branches:
            return None
        return re.sub(r'[^a-z0-9_]', '_', branch.lower())


class VersionStrategy(ABC):
    """
    Base class for version-derivation strategies.

    Subclasses implement build(); OPTIONS lists the keyword options
    their constructor accepts from configuration.
    """

    OPTIONS: Tuple[str, ...] = ()

    def __init__(self, naming: VersionNamingConfiguration, repository, metadatas: MetadataHolder):
        self.naming = naming
        self.repository = repository
        self.metadatas = metadatas

    def is_version_tag(self, tag: TagRef) -> bool:
        extracted = self.naming.extract_version(tag.name)
        if extracted is None:
            return False
        try:
            Version.parse(extracted)
        except ValueError:
            return False
        return True

    def version_from_tag(self, tag: TagRef) -> Version:
        extracted = self.naming.extract_version(tag.name)
        if extracted is None:
            raise ValueError(f"Tag {tag.name!r} is not a version tag")
        return Version.parse(extracted)

    @abstractmethod
    def build(self, head: Commit, base_commits: Sequence[Commit]):
        """Build the version of HEAD from the candidate base commits."""

    # ------------------------------------------------------------------
    # Helpers shared by strategies
    # ------------------------------------------------------------------

    @staticmethod
    def single_base(base_commits: Sequence[Commit]) -> Commit:
        if len(base_commits) != 1:
            raise ValueError(f"Expected exactly one base commit, got {len(base_commits)}")
        return base_commits[0]

    def max_version_tag(self, tags: Iterable[TagRef]) -> Optional[TagRef]:
        best: Optional[TagRef] = None
        best_version: Optional[Version] = None
        for tag in tags:
            version = self.version_from_tag(tag)
            if best_version is None or version > best_version:
                best, best_version = tag, version
        return best

    def base_tag(self, base: Commit) -> Optional[TagRef]:
        """Annotated tags win over lightweight ones on the same commit."""
        if base.annotated_tags:
            return self.max_version_tag(base.annotated_tags)
        return self.max_version_tag(base.lightweight_tags)

    def base_version(self, base: Commit) -> Tuple[Version, Optional[TagRef]]:
        """Version carried by the base commit, registering base metadata."""
        tag = self.base_tag(base)
        version = self.version_from_tag(tag) if tag is not None else Version.DEFAULT_VERSION

        if tag is not None:
            self.metadatas.register_metadata(Metadatas.BASE_TAG, tag.name)
            self.metadatas.register_metadata(Metadatas.BASE_TAG_TYPE, tag.tag_type.name)
        self.metadatas.register_metadata(Metadatas.BASE_VERSION, version)
        self.metadatas.register_metadata(Metadatas.BASE_COMMIT_ON_HEAD, str(base.distance == 0).lower())
        self.metadatas.register_metadata(Metadatas.COMMIT_DISTANCE, base.distance)
        return version, tag

    def is_dirty(self) -> bool:
        return self.metadatas.meta(Metadatas.DIRTY) == 'true'

    def branch_qualifier(self) -> Optional[str]:
        branch = self.repository.current_branch()
        qualifier = self.naming.branch_qualifier(branch)
        if branch:
            self.metadatas.register_metadata(Metadatas.BRANCH_NAME, branch)
        if qualifier:
            self.metadatas.register_metadata(Metadatas.QUALIFIED_BRANCH_NAME, qualifier)
        return qualifier

    def register_current_version(self, major: int, minor: int, patch: int) -> None:
        self.metadatas.register_metadata(Metadatas.CURRENT_VERSION_MAJOR, major)
        self.metadatas.register_metadata(Metadatas.CURRENT_VERSION_MINOR, minor)
        self.metadatas.register_metadata(Metadatas.CURRENT_VERSION_PATCH, patch)


def option_names(strategy_classes: List[type]) -> List[str]:
    """All option names accepted by the given strategy classes."""
    names: List[str] = []
    for cls in strategy_classes:
        names.extend(n for n in cls.OPTIONS if n not in names)
    return names
