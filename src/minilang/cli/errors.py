"""
CLI Error Handling
==================

Provides consistent error handling and exit codes for the mlc driver.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for the command-line driver."""
    SUCCESS = 0
    COMPILE_ERROR = 1    # Lexical, syntactic, semantic or codegen error
    INVALID_ARGS = 2     # Invalid arguments, missing or undecodable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised by a command and exit.

    Compiler errors are printed as formatted (location, source line,
    caret and hint); anything unexpected is reported as an internal
    error, with a traceback in verbose mode.

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from minilang.errors import MinilangError

    if isinstance(error, MinilangError):
        # Compiler errors already carry the "error:" prefix
        click.echo(str(error), err=True)
        sys.exit(ExitCode.COMPILE_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError,
                            UnicodeDecodeError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
