"""
Lookup policies and strategy names for tagver.
"""

from enum import Enum

from ..exit_codes import ConfigError


def _parse_enum(enum_cls, value, label: str):
    """Parse an enum member case-insensitively from a configuration value."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            pass
    choices = ', '.join(m.value for m in enum_cls)
    raise ConfigError(f"Unknown {label}: {value!r} (expected one of: {choices})")


class LookupPolicy(Enum):
    """Which reachable version tag becomes the base commit."""
    MAX = "max"            # highest version wins
    LATEST = "latest"      # most recently created annotated tag wins
    NEAREST = "nearest"    # closest tag wins, ties go to the latest

    @classmethod
    def parse(cls, value) -> 'LookupPolicy':
        return _parse_enum(cls, value, "lookup policy")


class Strategies(Enum):
    """Available version-derivation strategies."""
    CONFIGURABLE = "configurable"
    MAVEN = "maven"
    PEP440 = "pep440"

    @classmethod
    def parse(cls, value) -> 'Strategies':
        return _parse_enum(cls, value, "version strategy")
