"""
CLI Error Handling
==================

Maps exceptions to exit codes and messages for the tinycpp tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from tinycpp.errors import TinyCppError
from tinycpp.frontend.errors import ParseError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    PARSE_ERROR = 1      # Lexical or syntax error in the input
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, ParseError):
        # Already formatted as "file:line:col: error: ..."
        click.echo(str(error), err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    elif isinstance(error, TinyCppError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError, UnicodeDecodeError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
