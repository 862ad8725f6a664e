"""
Tag domain object for tagver.

A TagRef is a git tag reference as read from the repository:
- Lightweight tags: the ref points directly at a commit
- Annotated tags: the ref points at a tag object, which peels to a commit

TagRefs are immutable value objects; peeling returns a new TagRef.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

TAG_REF_PREFIX = "refs/tags/"


class TagType(Enum):
    """Kind of a git tag."""
    ANNOTATED = "annotated"
    LIGHTWEIGHT = "lightweight"


@dataclass(frozen=True)
class TagRef:
    """
    Named pointer to a git object.

    Examples:
        TagRef.lightweight("v1.0.0", "3f2a...")   -> target is the commit
        TagRef.annotated_tag("v1.0.0", "9c1e...", peeled_id="3f2a...")

    Attributes:
        name: Short tag name (e.g., "v1.0.0")
        object_id: Object the ref points at (tag object or commit)
        annotated: True when the ref points at an annotated tag object
        peeled_id: Commit an annotated tag resolves to, None if not peeled
        tagger_date: Tagger timestamp of an annotated tag, when known
        ref_name: Full ref name (e.g., "refs/tags/v1.0.0")
    """

    name: str
    object_id: str
    annotated: bool = False
    peeled_id: Optional[str] = None
    tagger_date: Optional[datetime] = None
    ref_name: str = ""

    def __post_init__(self):
        if not self.ref_name:
            object.__setattr__(self, 'ref_name', TAG_REF_PREFIX + self.name)

    @classmethod
    def lightweight(cls, name: str, commit_id: str) -> 'TagRef':
        return cls(name=name, object_id=commit_id, annotated=False)

    @classmethod
    def annotated_tag(
        cls,
        name: str,
        tag_object_id: str,
        peeled_id: Optional[str] = None,
        tagger_date: Optional[datetime] = None
    ) -> 'TagRef':
        return cls(
            name=name,
            object_id=tag_object_id,
            annotated=True,
            peeled_id=peeled_id,
            tagger_date=tagger_date
        )

    @classmethod
    def from_ref_name(cls, ref_name: str, object_id: str, **kwargs) -> 'TagRef':
        """Build a TagRef from a full ref name such as refs/tags/v1.0.0."""
        name = ref_name[len(TAG_REF_PREFIX):] if ref_name.startswith(TAG_REF_PREFIX) else ref_name
        return cls(name=name, object_id=object_id, ref_name=ref_name, **kwargs)

    @property
    def target(self) -> str:
        """Commit id this tag designates (peeled id when available)."""
        return self.peeled_id if self.peeled_id is not None else self.object_id

    @property
    def is_peeled(self) -> bool:
        return not self.annotated or self.peeled_id is not None

    @property
    def tag_type(self) -> TagType:
        return TagType.ANNOTATED if self.annotated else TagType.LIGHTWEIGHT

    def with_peeled_id(self, peeled_id: str) -> 'TagRef':
        return replace(self, peeled_id=peeled_id)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            'name': self.name,
            'ref': self.ref_name,
            'type': self.tag_type.value,
            'object': self.object_id,
            'target': self.target,
        }
        if self.tagger_date is not None:
            data['tagger_date'] = self.tagger_date.isoformat()
        return data

    def __str__(self) -> str:
        return self.name


# =============================================================================
# UTILITY FUNCTIONS (operate on TagRef objects)
# =============================================================================

def tags_of(tags: Iterable[TagRef], object_id: str) -> List[TagRef]:
    """Return the tags whose target is the given object id."""
    return [tag for tag in tags if tag.target == object_id]


def tag_names(tags: Iterable[TagRef]) -> List[str]:
    """Convert a list of TagRef objects to their short names."""
    return [tag.name for tag in tags]
