"""
Configurable version strategy (the default).

A clean HEAD carrying an annotated version tag gets that version. Anywhere
else the base version is decorated with qualifiers, in this order:

    <base>[-branch][-distance][-timestamp][-commitid][-dirty][-SNAPSHOT]

e.g. 1.0.0-feature_login-3-3f2a9c1e-dirty
"""

from datetime import timezone
from typing import Optional, Sequence

from ..domain.commit import Commit
from ..domain.version import SNAPSHOT, Version
from ..exit_codes import ConfigError
from .base import VersionStrategy

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class ConfigurableVersionStrategy(VersionStrategy):
    """Strategy driven by individual qualifier switches."""

    OPTIONS = (
        'auto_increment_patch',
        'use_distance',
        'use_git_commit_id',
        'git_commit_id_length',
        'use_commit_timestamp',
        'use_dirty',
        'use_long_format',
        'use_snapshot',
    )

    def __init__(
        self,
        naming,
        repository,
        metadatas,
        auto_increment_patch: bool = False,
        use_distance: bool = True,
        use_git_commit_id: bool = False,
        git_commit_id_length: int = 8,
        use_commit_timestamp: bool = False,
        use_dirty: bool = False,
        use_long_format: bool = False,
        use_snapshot: bool = False
    ):
        super().__init__(naming, repository, metadatas)
        if not 8 <= int(git_commit_id_length) <= 40:
            raise ConfigError("git_commit_id_length must be between 8 & 40")
        self.auto_increment_patch = auto_increment_patch
        self.use_distance = use_distance
        self.use_git_commit_id = use_git_commit_id
        self.git_commit_id_length = int(git_commit_id_length)
        self.use_commit_timestamp = use_commit_timestamp
        self.use_dirty = use_dirty
        self.use_long_format = use_long_format
        self.use_snapshot = use_snapshot

    def _commit_timestamp(self, commit_id: str) -> Optional[str]:
        date = self.repository.commit_date(commit_id)
        if date is None:
            return None
        if date.tzinfo is not None:
            date = date.astimezone(timezone.utc)
        return date.strftime(TIMESTAMP_FORMAT)

    def build(self, head: Commit, base_commits: Sequence[Commit]) -> Version:
        base = self.single_base(base_commits)
        dirty = self.is_dirty()
        base_version, base_tag = self.base_version(base)
        branch = self.branch_qualifier()

        head_tag = self.max_version_tag(head.annotated_tags)
        if head_tag is not None and not dirty and not self.use_long_format:
            version = self.version_from_tag(head_tag)
        else:
            version = base_version
            if (self.auto_increment_patch and base_tag is not None and base_tag.annotated
                    and (base.distance > 0 or dirty)):
                version = version.increment_patch()

            version = version.add_qualifier(branch)
            if self.use_long_format or (self.use_distance and base.distance > 0):
                version = version.add_qualifier(str(base.distance))
            if self.use_commit_timestamp:
                version = version.add_qualifier(self._commit_timestamp(head.id))
            if self.use_long_format:
                version = version.add_qualifier('g' + head.id[:self.git_commit_id_length])
            elif self.use_git_commit_id:
                version = version.add_qualifier(head.id[:self.git_commit_id_length])
            if self.use_dirty and dirty:
                version = version.add_qualifier('dirty')
            if self.use_snapshot and not version.is_snapshot:
                version = version.add_qualifier(SNAPSHOT)

        self.register_current_version(version.major, version.minor, version.patch)
        return version
