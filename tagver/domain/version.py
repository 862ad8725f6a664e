"""
Version domain object for tagver.

Versions have the shape MAJOR.MINOR.PATCH[-QUALIFIER...], e.g.:
    1.2.3
    1.2.3-SNAPSHOT
    1.2.3-feature_x-4-3f2a9c1e

Missing numeric parts default to 0 ("1.2" parses as 1.2.0). Versions are
totally ordered: numeric fields first, then a version without qualifiers
ranks above the same numbers with qualifiers, then qualifiers compare
element-wise (digits numerically, everything else lexically).
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Tuple

VERSION_PATTERN = re.compile(r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-(.+))?$')

SNAPSHOT = "SNAPSHOT"


def _qualifier_key(qualifier: str) -> tuple:
    if qualifier.isdigit():
        return (0, int(qualifier), qualifier)
    return (1, qualifier.lower(), qualifier)


@total_ordering
@dataclass(frozen=True)
class Version:
    """Comparable version value."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    qualifiers: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, version_str: str) -> 'Version':
        """
        Parse a version string.

        Args:
            version_str: Version such as "1.2.3" or "2.0-rc-1"

        Returns:
            Parsed Version

        Raises:
            ValueError: If the string is not a version
        """
        match = VERSION_PATTERN.match(version_str.strip())
        if not match:
            raise ValueError(f"Invalid version: {version_str!r}")

        major, minor, patch, rest = match.groups()
        qualifiers = tuple(q for q in rest.split('-') if q) if rest else ()
        return cls(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            qualifiers=qualifiers
        )

    def _sort_key(self) -> tuple:
        if not self.qualifiers:
            qualifier_key: tuple = (1,)
        else:
            qualifier_key = (0, tuple(_qualifier_key(q) for q in self.qualifiers))
        return (self.major, self.minor, self.patch, qualifier_key)

    def __lt__(self, other: 'Version') -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def increment_major(self) -> 'Version':
        return Version(self.major + 1, 0, 0, self.qualifiers)

    def increment_minor(self) -> 'Version':
        return Version(self.major, self.minor + 1, 0, self.qualifiers)

    def increment_patch(self) -> 'Version':
        return Version(self.major, self.minor, self.patch + 1, self.qualifiers)

    def add_qualifier(self, qualifier: str) -> 'Version':
        """Append a qualifier; blank qualifiers are ignored."""
        if not qualifier:
            return self
        return Version(self.major, self.minor, self.patch, self.qualifiers + (qualifier,))

    def remove_qualifier(self, qualifier: str) -> 'Version':
        kept = tuple(q for q in self.qualifiers if q != qualifier)
        return Version(self.major, self.minor, self.patch, kept)

    def no_qualifier(self) -> 'Version':
        return Version(self.major, self.minor, self.patch)

    @property
    def is_snapshot(self) -> bool:
        return any(q.upper() == SNAPSHOT for q in self.qualifiers)

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return base + ''.join(f"-{q}" for q in self.qualifiers)

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"


# Well-known versions returned when no regular computation is possible
Version.DEFAULT_VERSION = Version(0, 0, 0)
Version.EMPTY_REPOSITORY_VERSION = Version(0, 0, 0, ("EMPTY_GIT_REPOSITORY",))
Version.NOT_GIT_VERSION = Version(0, 0, 0, ("NOT_A_GIT_REPOSITORY",))
Version.NO_WORKTREE_AND_INDEX = Version(0, 0, 0, ("NO_WORKTREE_AND_INDEX",))
