"""
Handles the 'describe' command: explain how the version was computed.
"""

import click

from ..cli_utils import standard_command, add_common_options
from ..render import render_description, render_metadata_table
from .version import build_calculator, engine_options


@click.command(name='describe')
@add_common_options('path')
@engine_options
@click.option('-m', '--metadata', 'with_metadata', is_flag=True,
              help='Include every metadata value registered by the computation')
@add_common_options('format', 'verbose', 'quiet')
@standard_command
def describe_handler(path, strategy, lookup_policy, max_depth, find_tag_version_pattern,
                     extra_options, with_metadata, format, verbose, quiet):
    """Show the version together with its head and base commits.

    Examples:

    \b
        tagver describe                  # version, base tag, distance
        tagver describe -m -f yaml       # with all metadata as YAML
        tagver describe -f table         # human readable
    """
    calculator = build_calculator(path, strategy, lookup_policy, max_depth,
                                  find_tag_version_pattern, extra_options)
    description = calculator.describe()
    if with_metadata:
        description['metadata'] = calculator.metadatas.to_dict()

    if format == 'table':
        if not quiet:
            render_description(description)
            if with_metadata:
                render_metadata_table(description['metadata'])
        return None

    return description
