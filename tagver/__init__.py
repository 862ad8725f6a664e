"""
tagver - Compute project versions from git tags.

tagver walks the history of a git repository, finds the version tags
reachable from HEAD and derives a version string from the selected base
tag, the distance to it and the state of the working tree.

Quick Start:
    import tagver

    calculator = tagver.VersionCalculator("/path/to/repo")
    print(calculator.get_version())                 # "1.0.0-3"

    # Pick the closest tag instead of the highest one
    calculator.configure(lookup_policy="nearest")

    # Maven SNAPSHOT or PEP 440 versions
    calculator.configure(strategy="maven")          # "1.0.1-SNAPSHOT"
    calculator.configure(strategy="pep440")         # "1.0.1.dev3+g3f2a9c1e"

    # What the computation learned
    print(calculator.meta(tagver.Metadatas.BASE_TAG))
    print(calculator.meta("next_minor_version"))

Lookup Policies:
    max     - Highest version among reachable version tags (default)
    latest  - Most recently created annotated version tag
    nearest - Closest version tag, ties broken by creation date

Strategies:
    configurable - Base version plus opt-in qualifiers (default)
    maven        - Release version or next-version SNAPSHOT
    pep440       - PEP 440 versions for Python packaging
"""

__version__ = "0.1.0"

from .domain import (
    TagRef,
    TagType,
    Commit,
    Version,
    LookupPolicy,
    Strategies,
    Metadatas,
    MetadataHolder,
)
from .exit_codes import (
    CommandError,
    ConfigError,
    GitCommandError,
    NotAGitRepositoryError,
    NoWorkTreeError,
    VersionCalculationError,
)
from .infra import GitClient
from .services import (
    BaseCommitResolver,
    DistanceCalculator,
    TagSets,
    VersionCalculator,
    classify,
    filter_reachable_tags,
)
from .strategies import VersionNamingConfiguration, create_strategy

__all__ = [
    '__version__',
    'TagRef',
    'TagType',
    'Commit',
    'Version',
    'LookupPolicy',
    'Strategies',
    'Metadatas',
    'MetadataHolder',
    'CommandError',
    'ConfigError',
    'GitCommandError',
    'NotAGitRepositoryError',
    'NoWorkTreeError',
    'VersionCalculationError',
    'GitClient',
    'BaseCommitResolver',
    'DistanceCalculator',
    'TagSets',
    'VersionCalculator',
    'classify',
    'filter_reachable_tags',
    'VersionNamingConfiguration',
    'create_strategy',
]
