"""
Tag classification for tagver.

Partitions the raw tag list of a repository into twelve overlapping sets in
a single pass. Each tag gets a 3-bit signature:

    bit 2: the tag targets HEAD
    bit 1: the tag name is a version (per the active strategy)
    bit 0: the tag is annotated

and SIGNATURE_MEMBERSHIP maps every signature to the sets it belongs to.
Membership cascades: a tag in a specific set (head_version_annotated) is
always in the general sets it refines (head_version, head_annotated,
all_version_annotated, all_version, all_annotated, head). Every tag is in
all_tags.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..domain.tag import TagRef
from ..domain.metadata import Metadatas, MetadataHolder
from ..exit_codes import GitCommandError

logger = logging.getLogger(__name__)

ON_HEAD = 0b100
VERSION = 0b010
ANNOTATED = 0b001

SIGNATURE_MEMBERSHIP: Dict[int, Tuple[str, ...]] = {
    0b000: ('all_lightweight',),
    0b001: ('all_annotated',),
    0b010: ('all_version', 'all_version_lightweight', 'all_lightweight'),
    0b011: ('all_version', 'all_version_annotated', 'all_annotated'),
    0b100: ('head', 'head_lightweight', 'all_lightweight'),
    0b101: ('head', 'head_annotated', 'all_annotated'),
    0b110: ('head', 'head_version', 'head_lightweight', 'head_version_lightweight',
            'all_version', 'all_version_lightweight', 'all_lightweight'),
    0b111: ('head', 'head_version', 'head_annotated', 'head_version_annotated',
            'all_version', 'all_version_annotated', 'all_annotated'),
}


def signature(tag: TagRef, head_id: Optional[str], is_version_tag: Callable[[TagRef], bool]) -> int:
    """Compute the 3-bit classification signature of a (peeled) tag."""
    on_head = head_id is not None and tag.target == head_id
    return (
        (ON_HEAD if on_head else 0)
        | (VERSION if is_version_tag(tag) else 0)
        | (ANNOTATED if tag.annotated else 0)
    )


@dataclass
class TagSets:
    """The twelve classified tag sets, each in raw tag-list order."""
    all: List[TagRef] = field(default_factory=list)
    all_annotated: List[TagRef] = field(default_factory=list)
    all_lightweight: List[TagRef] = field(default_factory=list)
    all_version: List[TagRef] = field(default_factory=list)
    all_version_annotated: List[TagRef] = field(default_factory=list)
    all_version_lightweight: List[TagRef] = field(default_factory=list)
    head: List[TagRef] = field(default_factory=list)
    head_annotated: List[TagRef] = field(default_factory=list)
    head_lightweight: List[TagRef] = field(default_factory=list)
    head_version: List[TagRef] = field(default_factory=list)
    head_version_annotated: List[TagRef] = field(default_factory=list)
    head_version_lightweight: List[TagRef] = field(default_factory=list)

    @classmethod
    def names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def get(self, name: str) -> List[TagRef]:
        """Look up a set by name; dashes are accepted in place of underscores."""
        key = name.replace('-', '_')
        if key not in self.names():
            raise KeyError(f"Unknown tag set: {name}")
        return getattr(self, key)

    def add(self, tag: TagRef, sig: int) -> None:
        self.all.append(tag)
        for name in SIGNATURE_MEMBERSHIP[sig]:
            getattr(self, name).append(tag)

    def register(self, metadatas: MetadataHolder, include_head: bool = True) -> None:
        """Register the sets as tag metadata."""
        metadatas.register_metadata_tags(Metadatas.ALL_TAGS, self.all)
        metadatas.register_metadata_tags(Metadatas.ALL_ANNOTATED_TAGS, self.all_annotated)
        metadatas.register_metadata_tags(Metadatas.ALL_LIGHTWEIGHT_TAGS, self.all_lightweight)
        metadatas.register_metadata_tags(Metadatas.ALL_VERSION_TAGS, self.all_version)
        metadatas.register_metadata_tags(Metadatas.ALL_VERSION_ANNOTATED_TAGS, self.all_version_annotated)
        metadatas.register_metadata_tags(Metadatas.ALL_VERSION_LIGHTWEIGHT_TAGS, self.all_version_lightweight)
        if not include_head:
            return
        metadatas.register_metadata_tags(Metadatas.HEAD_TAGS, self.head)
        metadatas.register_metadata_tags(Metadatas.HEAD_ANNOTATED_TAGS, self.head_annotated)
        metadatas.register_metadata_tags(Metadatas.HEAD_LIGHTWEIGHT_TAGS, self.head_lightweight)
        metadatas.register_metadata_tags(Metadatas.HEAD_VERSION_TAGS, self.head_version)
        metadatas.register_metadata_tags(Metadatas.HEAD_VERSION_ANNOTATED_TAGS, self.head_version_annotated)
        metadatas.register_metadata_tags(Metadatas.HEAD_VERSION_LIGHTWEIGHT_TAGS, self.head_version_lightweight)

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: [t.name for t in getattr(self, name)] for name in self.names()}


def _peel_or_keep(tag: TagRef, peel: Optional[Callable[[TagRef], TagRef]]) -> TagRef:
    if peel is None:
        return tag
    try:
        return peel(tag)
    except GitCommandError as e:
        logger.debug(f"Could not peel tag {tag.name}, keeping unpeeled target: {e}")
        return tag


def classify(
    raw_tags: Iterable[TagRef],
    head_id: Optional[str],
    is_version_tag: Callable[[TagRef], bool],
    peel: Optional[Callable[[TagRef], TagRef]] = None
) -> TagSets:
    """
    Classify tags into the twelve tag sets.

    Args:
        raw_tags: Tags as listed by the repository
        head_id: Current HEAD commit id (None for an empty repository)
        is_version_tag: Predicate telling version tags apart
        peel: Resolves an annotated tag to its commit; failures keep the tag as is

    Returns:
        TagSets holding peeled tags
    """
    sets = TagSets()
    for raw_tag in raw_tags:
        tag = _peel_or_keep(raw_tag, peel)
        sets.add(tag, signature(tag, head_id, is_version_tag))

    logger.debug(
        f"Classified {len(sets.all)} tags: {len(sets.all_version)} version tags, "
        f"{len(sets.head)} on HEAD"
    )
    return sets
