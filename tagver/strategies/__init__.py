"""
Version-derivation strategies for tagver.

- configurable: base version plus opt-in qualifiers (default)
- maven: release or next-version SNAPSHOT
- pep440: PEP 440 versions for Python packaging
"""

from typing import Any, Dict, Optional

from ..domain.metadata import MetadataHolder
from ..domain.policy import Strategies
from .base import (
    DEFAULT_FIND_TAG_VERSION_PATTERN,
    DEFAULT_NON_QUALIFIER_BRANCHES,
    VersionNamingConfiguration,
    VersionStrategy,
    option_names,
)
from .configurable import ConfigurableVersionStrategy
from .maven import MavenVersionStrategy
from .pep440 import Pep440VersionStrategy

# Strategy registry
STRATEGIES = {
    Strategies.CONFIGURABLE: ConfigurableVersionStrategy,
    Strategies.MAVEN: MavenVersionStrategy,
    Strategies.PEP440: Pep440VersionStrategy,
}

STRATEGY_OPTIONS = option_names(list(STRATEGIES.values()))


def create_strategy(
    name,
    naming: VersionNamingConfiguration,
    repository,
    metadatas: MetadataHolder,
    options: Optional[Dict[str, Any]] = None
) -> VersionStrategy:
    """
    Instantiate a strategy by name.

    Options not understood by the chosen strategy are ignored, so one
    configuration section can serve every strategy.

    Raises:
        ConfigError: For an unknown strategy name
    """
    strategy_cls = STRATEGIES[Strategies.parse(name)]
    options = options or {}
    kwargs = {k: v for k, v in options.items() if k in strategy_cls.OPTIONS}
    return strategy_cls(naming, repository, metadatas, **kwargs)


__all__ = [
    'DEFAULT_FIND_TAG_VERSION_PATTERN',
    'DEFAULT_NON_QUALIFIER_BRANCHES',
    'VersionNamingConfiguration',
    'VersionStrategy',
    'ConfigurableVersionStrategy',
    'MavenVersionStrategy',
    'Pep440VersionStrategy',
    'STRATEGIES',
    'STRATEGY_OPTIONS',
    'create_strategy',
]
