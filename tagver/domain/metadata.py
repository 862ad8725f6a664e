"""
Metadata collected while computing a version.

Every computation registers what it learned (tag sets, head commit details,
base version, next versions) so callers and build plugins can read it back
with `VersionCalculator.meta()`.
"""

from enum import Enum
from typing import Dict, Iterable, Optional

from .tag import TagRef


class Metadatas(Enum):
    """Known metadata keys."""
    # Tag sets
    ALL_TAGS = "all_tags"
    ALL_ANNOTATED_TAGS = "all_annotated_tags"
    ALL_LIGHTWEIGHT_TAGS = "all_lightweight_tags"
    ALL_VERSION_TAGS = "all_version_tags"
    ALL_VERSION_ANNOTATED_TAGS = "all_version_annotated_tags"
    ALL_VERSION_LIGHTWEIGHT_TAGS = "all_version_lightweight_tags"
    HEAD_TAGS = "head_tags"
    HEAD_ANNOTATED_TAGS = "head_annotated_tags"
    HEAD_LIGHTWEIGHT_TAGS = "head_lightweight_tags"
    HEAD_VERSION_TAGS = "head_version_tags"
    HEAD_VERSION_ANNOTATED_TAGS = "head_version_annotated_tags"
    HEAD_VERSION_LIGHTWEIGHT_TAGS = "head_version_lightweight_tags"

    # Working tree and head commit
    DIRTY = "dirty"
    DIRTY_TEXT = "dirty_text"
    GIT_SHA1_FULL = "git_sha1_full"
    GIT_SHA1_8 = "git_sha1_8"
    HEAD_COMMITTER_NAME = "head_committer_name"
    HEAD_COMMITTER_EMAIL = "head_committer_email"
    HEAD_COMMIT_DATETIME = "head_commit_datetime"
    BRANCH_NAME = "branch_name"
    QUALIFIED_BRANCH_NAME = "qualified_branch_name"

    # Base commit
    BASE_TAG = "base_tag"
    BASE_TAG_TYPE = "base_tag_type"
    BASE_VERSION = "base_version"
    BASE_COMMIT_ON_HEAD = "base_commit_on_head"
    COMMIT_DISTANCE = "commit_distance"

    # Results
    CURRENT_VERSION_MAJOR = "current_version_major"
    CURRENT_VERSION_MINOR = "current_version_minor"
    CURRENT_VERSION_PATCH = "current_version_patch"
    CALCULATED_VERSION = "calculated_version"
    NEXT_MAJOR_VERSION = "next_major_version"
    NEXT_MINOR_VERSION = "next_minor_version"
    NEXT_PATCH_VERSION = "next_patch_version"


class MetadataHolder:
    """Mutable store of metadata for one version computation."""

    def __init__(self):
        self._values: Dict[Metadatas, str] = {}

    def register_metadata(self, key: Metadatas, value) -> None:
        self._values[key] = str(value)

    def register_metadata_tags(self, key: Metadatas, tags: Iterable[TagRef]) -> None:
        """Store a tag set as a comma-separated list of short names."""
        self._values[key] = ','.join(tag.name for tag in tags)

    def meta(self, key: Metadatas) -> Optional[str]:
        return self._values.get(key)

    def __contains__(self, key: Metadatas) -> bool:
        return key in self._values

    def to_dict(self) -> Dict[str, str]:
        return {key.value: value for key, value in self._values.items()}
