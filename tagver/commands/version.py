"""
Handles the 'version' command: print the computed version of a repository.

This command follows our design principles:
- Default output is JSONL
- --verbose/-v for debug logging
- --quiet/-q to suppress JSON output
- Thin CLI layer that connects the VersionCalculator to output
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..config import load_config
from ..domain.policy import LookupPolicy, Strategies
from ..exit_codes import ConfigError
from ..render import console
from ..services.calculator import VersionCalculator


def _parse_option(raw):
    """Parse one KEY=VALUE option, converting booleans and integers."""
    if '=' not in raw:
        raise ConfigError(f"Invalid option {raw!r}, expected KEY=VALUE")
    key, value = raw.split('=', 1)
    key = key.strip().replace('-', '_')
    lowered = value.strip().lower()
    if lowered in ('true', 'yes', 'on'):
        return key, True
    if lowered in ('false', 'no', 'off'):
        return key, False
    if lowered.isdigit():
        return key, int(lowered)
    return key, value.strip()


def engine_options(func):
    """Options selecting strategy, lookup policy and depth, shared by commands."""
    options = [
        click.option('-s', '--strategy', type=click.Choice([s.value for s in Strategies], case_sensitive=False),
                     help='Version strategy (default from configuration)'),
        click.option('-l', '--lookup-policy', type=click.Choice([p.value for p in LookupPolicy], case_sensitive=False),
                     help='How the base tag is chosen: max, latest or nearest'),
        click.option('--max-depth', type=click.IntRange(min=0),
                     help='Maximum commit distance searched from HEAD'),
        click.option('--pattern', 'find_tag_version_pattern',
                     help='Regex extracting the version from a tag name (group 1)'),
        click.option('-o', '--option', 'extra_options', multiple=True, metavar='KEY=VALUE',
                     help='Strategy option, e.g. -o use_dirty=true (repeatable)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_calculator(path, strategy=None, lookup_policy=None, max_depth=None,
                     find_tag_version_pattern=None, extra_options=()):
    """Create a VersionCalculator for path with command-line overrides applied."""
    calculator = VersionCalculator(path, config=load_config(project_dir=path))

    overrides = dict(_parse_option(raw) for raw in extra_options)
    if strategy:
        overrides['strategy'] = strategy
    if lookup_policy:
        overrides['lookup_policy'] = lookup_policy
    if max_depth is not None:
        overrides['max_depth'] = max_depth
    if find_tag_version_pattern:
        overrides['find_tag_version_pattern'] = find_tag_version_pattern

    if overrides:
        calculator.configure(**overrides)
    return calculator


@click.command(name='version')
@add_common_options('path')
@engine_options
@click.option('--plain', is_flag=True, help='Print only the version string')
@click.option('--force', is_flag=True, help='Recompute even if HEAD did not move')
@add_common_options('format', 'verbose', 'quiet')
@standard_command
def version_handler(path, strategy, lookup_policy, max_depth, find_tag_version_pattern,
                    extra_options, plain, force, format, verbose, quiet):
    """Compute the version of a git repository.

    \b
    The version derives from the version tags reachable from HEAD:
    the base tag is chosen by the lookup policy, then the strategy
    adds qualifiers for distance, branch, dirtiness and so on.

    Examples:

    \b
        tagver version                         # {"path": ".", "version": "1.0.1-3"}
        tagver version --plain                 # 1.0.1-3
        tagver version -s maven                # 1.0.1-SNAPSHOT
        tagver version -l nearest -C ../lib    # nearest tag in another repo
        tagver version -o use_dirty=true -o use_git_commit_id=true
    """
    calculator = build_calculator(path, strategy, lookup_policy, max_depth,
                                  find_tag_version_pattern, extra_options)
    version = calculator.get_version(force=force)

    if plain:
        if not quiet:
            click.echo(version)
        return None

    if format == 'table':
        console.print(f"[bold green]{version}[/bold green]")
        return None

    return {'path': path, 'version': version}
