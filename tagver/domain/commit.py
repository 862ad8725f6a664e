"""
Commit domain object for tagver.

A Commit is the resolved outcome of a base-commit search: which commit the
version derives from, how far it sits from HEAD, and the version tags found
on it.
"""

from dataclasses import dataclass
from typing import Tuple

from .tag import TagRef


@dataclass(frozen=True)
class Commit:
    """
    Resolved base (or head) commit.

    Attributes:
        id: Full commit object id
        distance: Ancestry edges from HEAD to this commit (0 for HEAD itself)
        annotated_tags: Annotated version tags targeting this commit
        lightweight_tags: Lightweight version tags targeting this commit
    """

    id: str
    distance: int = 0
    annotated_tags: Tuple[TagRef, ...] = ()
    lightweight_tags: Tuple[TagRef, ...] = ()

    def __post_init__(self):
        if self.distance < 0:
            raise ValueError(f"commit distance must be >= 0, got {self.distance}")
        # Accept any sequence but store tuples so instances stay hashable
        object.__setattr__(self, 'annotated_tags', tuple(self.annotated_tags))
        object.__setattr__(self, 'lightweight_tags', tuple(self.lightweight_tags))

    @property
    def tags(self) -> Tuple[TagRef, ...]:
        return self.annotated_tags + self.lightweight_tags

    @property
    def is_tagged(self) -> bool:
        return bool(self.annotated_tags or self.lightweight_tags)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'distance': self.distance,
            'annotated_tags': [t.name for t in self.annotated_tags],
            'lightweight_tags': [t.name for t in self.lightweight_tags],
        }
