#!/usr/bin/env python3

import click

from tagver import __version__

from tagver.commands.version import version_handler
from tagver.commands.describe import describe_handler
from tagver.commands.tags import tags_handler
from tagver.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__, prog_name='tagver')
def cli():
    """tagver - Compute project versions from git tags.

    Finds the version tags reachable from HEAD, picks a base tag with a
    lookup policy (max, latest or nearest) and derives the version with a
    strategy (configurable, maven or pep440).
    """
    pass


cli.add_command(version_handler, name='version')
cli.add_command(describe_handler, name='describe')
cli.add_command(tags_handler, name='tags')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
