"""
CLI Error Handling
==================

Maps validation failures to diagnostics and exit codes. Grammar violations
exit with their production's status (100-111); everything else uses the
small ExitCode table below.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes for failures that are not grammar violations."""
    SUCCESS = 0
    INPUT_ERROR = 1      # Input exhausted, token too long, nesting too deep
    INVALID_ARGS = 2     # Invalid arguments or unreadable input file
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching status.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from recdec.errors import GrammarError, RecDecError

    if isinstance(error, GrammarError):
        # Already formatted with location, source line and production hint
        click.echo(str(error), err=True)
        sys.exit(int(error.exit_code))

    elif isinstance(error, RecDecError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.INPUT_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, UnicodeDecodeError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
