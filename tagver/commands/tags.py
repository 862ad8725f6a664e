"""
Handles the 'tags' command: list tags as the version engine classifies them.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..domain.metadata import MetadataHolder
from ..exit_codes import NotAGitRepositoryError
from ..render import render_tags_table
from ..services.reachability import filter_reachable_tags
from ..services.tag_classifier import TagSets
from .version import build_calculator, engine_options


def _tag_rows(calculator, tag_set, reachable_only):
    if not calculator.git.is_git_repo():
        raise NotAGitRepositoryError(calculator.path)

    strategy = calculator.create_strategy(MetadataHolder())
    head_id = calculator.git.resolve('HEAD')
    sets = calculator.classify_tags()
    selected = sets.get(tag_set)

    if reachable_only:
        selected = filter_reachable_tags(calculator.git, head_id, selected) if head_id else []

    memberships = sets.to_dict()
    for tag in selected:
        row = tag.to_dict()
        row['on_head'] = head_id is not None and tag.target == head_id
        row['version'] = str(strategy.version_from_tag(tag)) if strategy.is_version_tag(tag) else None
        row['sets'] = [name for name, names in memberships.items() if tag.name in names]
        yield row


@click.command(name='tags')
@add_common_options('path')
@engine_options
@click.option('--set', 'tag_set', default='all', show_default=True,
              type=click.Choice(TagSets.names()),
              help='Only list tags of one classified set')
@click.option('--reachable', is_flag=True, help='Only list tags reachable from HEAD')
@add_common_options('format', 'verbose', 'quiet')
@standard_command
def tags_handler(path, strategy, lookup_policy, max_depth, find_tag_version_pattern,
                 extra_options, tag_set, reachable, format, verbose, quiet):
    """List repository tags with their classification.

    Each tag is reported with its type, target commit, the version it
    carries (when it is a version tag for the active strategy) and the
    sets it belongs to.

    Examples:

    \b
        tagver tags                               # all tags as JSONL
        tagver tags --set all_version_annotated   # released versions
        tagver tags --reachable -f table
    """
    calculator = build_calculator(path, strategy, lookup_policy, max_depth,
                                  find_tag_version_pattern, extra_options)
    rows = _tag_rows(calculator, tag_set, reachable)

    if format == 'table':
        if not quiet:
            render_tags_table(list(rows), title=f"Tags ({tag_set})")
        return None

    return rows
