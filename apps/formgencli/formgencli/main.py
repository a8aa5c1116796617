"""formgen CLI Main Entry Point

Generates form metadata and action dispatchers for modules of actions.

Usage:
    formgen generate page.py                    # Print the generated module
    formgen generate page.py -o page_gen.py     # Write it to a file
    formgen generate page.py -o page_gen.py --check
    formgen generate page.py -c actions.yaml    # Override __actions__
    formgen inspect page.py                     # List actions and fields
    formgen --version                           # Show version
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from ._version import __version__
from .commands import generate_command, inspect_command

typer_app = typer.Typer(no_args_is_help=True)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"formgen {__version__}")
        raise typer.Exit()


@typer_app.callback()
def cli(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Generate form metadata and action dispatchers for Python modules."""


@typer_app.command()
def generate(
    source: Path = typer.Argument(..., help="Actions module to process."),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML configuration merged over __actions__."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the generated module to this file."
    ),
    check: bool = typer.Option(
        False, "--check", help="Fail when OUTPUT is not up to date."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Generate the augmented module for SOURCE.

    \b
    Examples:
        formgen generate page.py                  Print to stdout
        formgen generate page.py -o out.py        Write to out.py
        formgen generate page.py -o out.py --check
    """
    generate_command(source, config=config, output=output, check=check, verbose=verbose)


@typer_app.command()
def inspect(
    source: Path = typer.Argument(..., help="Actions module to inspect."),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML configuration merged over __actions__."
    ),
) -> None:
    """List the actions of SOURCE with their routes and fields."""
    inspect_command(source, config=config)


def app(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    typer_app(args=argv)


if __name__ == "__main__":
    app()
