"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
from functools import wraps
from typing import Generator

import click

from .config import configure_logging, load_config
from .exit_codes import SUCCESS, INTERRUPTED, CommandError, get_exit_code_for_exception
from .format_utils import format_output, get_format_from_env

logger = logging.getLogger(__name__)


def _print_error(e: Exception, exit_code: int) -> None:
    error_obj = {
        "error": str(e),
        "type": type(e).__name__,
        "exit_code": exit_code
    }
    print(json.dumps(error_obj, ensure_ascii=False), flush=True)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Diagnostics through logging on stderr (--verbose enables debug)
    - Clean JSON output on stdout
    - --quiet/-q to suppress data output
    - Consistent error handling with exit codes

    The wrapped command returns a dict, a list or a generator of dicts.
    Returning None means the command handled its own output (table mode).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)
        output_format = kwargs.get('format', None)

        if output_format is None:
            output_format = get_format_from_env('jsonl')
            kwargs['format'] = output_format

        try:
            configure_logging(load_config(), verbose=verbose)
            result = func(*args, **kwargs)

            if quiet:
                if isinstance(result, Generator):
                    for _ in result:
                        pass
            elif result is None or output_format == 'table':
                pass
            else:
                if isinstance(result, dict):
                    items = iter([result])
                elif isinstance(result, (list, tuple)):
                    items = iter(result)
                else:
                    items = result
                for line in format_output(items, output_format):
                    print(line, flush=True)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            logger.error(str(e))
            if not quiet:
                _print_error(e, e.exit_code)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            exit_code = get_exit_code_for_exception(e)
            if not quiet:
                _print_error(e, exit_code)
            sys.exit(exit_code)

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show debug logging on stderr'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Suppress data output'),
    'format': click.option('-f', '--format',
                           type=click.Choice(['json', 'jsonl', 'yaml', 'table']),
                           help='Output format (default: jsonl, or from TAGVER_FORMAT env)'),
    'path': click.option('-C', '--path', 'path', default='.',
                         type=click.Path(file_okay=False),
                         help='Repository path (default: current directory)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'quiet')
        def my_command(verbose, quiet):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
