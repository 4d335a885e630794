"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the gbfix tool.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from gbfix.errors import GBFixError, HeaderValidationError


class ExitCode(IntEnum):
    """Standard exit codes for the CLI."""
    SUCCESS = 0
    HEADER_ERROR = 1     # I/O failure or invalid header field
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for the CLI.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Update")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    prefix = f"{error_type} error: " if error_type else "Error: "

    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        # Invalid command-line arguments or unusable input file
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, HeaderValidationError) and error_type == "Update":
        # Bad value in the requested update
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, GBFixError):
        # Header I/O or format errors
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.HEADER_ERROR)

    else:
        # Unexpected internal error
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
