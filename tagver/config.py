#!/usr/bin/env python3
"""
Configuration for tagver.

Configuration is a plain nested dict with three sections: `version` (engine
and strategy options), `git` (subprocess settings) and `logging`.
"""

import json
import logging
import os
import sys
import tomllib
from pathlib import Path

import toml
import yaml

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)
logger = logging.getLogger("tagver")

ENV_PREFIX = "TAGVER_"
PROJECT_CONFIG_NAME = ".tagver.toml"
USER_CONFIG_NAMES = ('config.json', 'config.toml', 'config.yaml', 'config.yml')


def get_config_path():
    """Get the path to the user configuration file.

    Checks in order:
    1. TAGVER_CONFIG environment variable
    2. ~/.tagver/ directory (config.json, config.toml, config.yaml, config.yml)

    When nothing exists yet, ~/.tagver/config.json is returned as the place
    to save to.
    """
    if 'TAGVER_CONFIG' in os.environ:
        path = Path(os.environ['TAGVER_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.tagver'
    for filename in USER_CONFIG_NAMES:
        path = config_dir / filename
        if path.exists():
            return path
    return config_dir / USER_CONFIG_NAMES[0]


def get_default_config():
    """Get default configuration."""
    return {
        "version": {
            "strategy": "configurable",
            "lookup_policy": "max",
            "max_depth": None,
            "find_tag_version_pattern": r"v?([0-9]+(?:\.[0-9]+){0,2}(?:-[a-zA-Z0-9\-_]+)?)",
            "non_qualifier_branches": ["master", "main"],
            "auto_increment_patch": False,
            "use_distance": True,
            "use_git_commit_id": False,
            "git_commit_id_length": 8,
            "use_commit_timestamp": False,
            "use_dirty": False,
            "use_long_format": False,
            "use_snapshot": False,
            "force_computation": False
        },
        "git": {
            "timeout_seconds": 30
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def _load_file(config_path):
    """Read one configuration file; the format follows the file suffix."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    with open(config_path, 'r') as f:
        if suffix in ('.yaml', '.yml'):
            return yaml.safe_load(f) or {}
        return json.load(f)


def load_config(project_dir=None):
    """
    Load configuration.

    Layers, later ones winning:
    1. Built-in defaults
    2. User configuration file (see get_config_path)
    3. Project file .tagver.toml in project_dir, if given
    4. TAGVER_* environment variables

    Unreadable files are logged and skipped.
    """
    config = get_default_config()

    paths = [get_config_path()]
    if project_dir is not None:
        paths.append(Path(project_dir) / PROJECT_CONFIG_NAME)

    for config_path in paths:
        if not config_path.exists():
            continue
        try:
            file_config = _load_file(config_path)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")
            continue
        if isinstance(file_config, dict):
            config = merge_configs(config, file_config)
        logger.debug(f"Loaded config from {config_path}")

    # Apply environment variable overrides
    return apply_env_overrides(config)


def save_config(config, config_path=None):
    """Save configuration to file (JSON, TOML or YAML by suffix)."""
    config_path = Path(config_path) if config_path else get_config_path()
    suffix = config_path.suffix.lower()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            if suffix == '.toml':
                # tomllib only reads
                toml.dump(config, f)
            elif suffix in ('.yaml', '.yml'):
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(config, f, indent=2)
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")
        raise

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def configure_logging(config, verbose=False):
    """Apply the logging section of a configuration to the tagver logger."""
    section = config.get('logging', {})
    level_name = 'DEBUG' if verbose else str(section.get('level', 'WARNING')).upper()
    level = getattr(logging, level_name, logging.WARNING)

    logger.setLevel(level)
    fmt = section.get('format')
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def _typed_env_value(value):
    lowered = value.lower()
    if lowered in ('true', 'yes', 'on'):
        return True
    if lowered in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def _set_by_parts(config, parts, value):
    """
    Set the key addressed by underscore-split parts.

    Config keys contain underscores themselves, so at each level the longest
    key matching the leading parts is taken. Returns False when no key matches.
    """
    level = config
    i = 0
    while i < len(parts):
        matched = None
        for key in level:
            key_parts = key.split('_')
            if parts[i:i + len(key_parts)] == key_parts:
                if matched is None or len(key_parts) > len(matched.split('_')):
                    matched = key
        if matched is None:
            return False

        i += len(matched.split('_'))
        if i == len(parts):
            level[matched] = value
            return True
        if not isinstance(level[matched], dict):
            return False
        level = level[matched]
    return False


def apply_env_overrides(config):
    """
    Apply TAGVER_SECTION_KEY environment variables to a configuration.

    For example TAGVER_VERSION_LOOKUP_POLICY=nearest or
    TAGVER_GIT_TIMEOUT_SECONDS=10. Values 'true'/'false' (also yes/no, on/off)
    and digit strings are converted. Variables naming no known key are ignored.
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key in ('TAGVER_CONFIG', 'TAGVER_FORMAT'):
            continue
        parts = env_key[len(ENV_PREFIX):].lower().split('_')
        if _set_by_parts(config, parts, _typed_env_value(value)):
            logger.debug(f"Configuration override from {env_key}")

    return config
