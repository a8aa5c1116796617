"""Shared error handling for formgencli."""

import sys
from typing import NoReturn

import typer

from formgen.errors import GenerationError


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Report a failed run and exit.

    Generation errors already carry their ``file:line:col`` location.
    """
    if isinstance(error, GenerationError):
        typer.secho(str(error), err=True, fg=typer.colors.RED)
        sys.exit(1)
    elif isinstance(error, OSError):
        exit_with_error(str(error))
    else:
        # Unexpected error
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)
