"""
Domain layer for tagver.

Contains pure domain objects with no I/O or side effects:
- TagRef: A git tag reference (annotated or lightweight)
- Commit: A resolved base commit with its distance from HEAD
- Version: A comparable MAJOR.MINOR.PATCH[-QUALIFIER...] value
- LookupPolicy / Strategies: Engine configuration enums
- Metadatas / MetadataHolder: What a computation learned

These objects are immutable where possible and provide
serialization methods for JSON output.
"""

from .tag import TagRef, TagType, tags_of, tag_names
from .commit import Commit
from .version import Version
from .policy import LookupPolicy, Strategies
from .metadata import Metadatas, MetadataHolder

__all__ = [
    'TagRef',
    'TagType',
    'tags_of',
    'tag_names',
    'Commit',
    'Version',
    'LookupPolicy',
    'Strategies',
    'Metadatas',
    'MetadataHolder',
]
