"""Generate command - write the augmented actions module"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from formgen import generate

from ..lib.errors import exit_with_error, handle_error
from .utils import console, read_overrides, setup_logging

log = logging.getLogger(__name__)


def generate_command(
    source: Path,
    config: Optional[Path] = None,
    output: Optional[Path] = None,
    check: bool = False,
    verbose: bool = False,
) -> None:
    """Generate the module for SOURCE and write it to OUTPUT or stdout."""
    setup_logging(verbose)

    if check and output is None:
        exit_with_error("--check requires --output")

    try:
        generated = generate(
            source.read_text(encoding="utf-8"),
            filename=str(source),
            config=read_overrides(config),
        )
    except Exception as exc:
        handle_error(exc)

    if output is None:
        typer.echo(generated, nl=False)
        return

    if check:
        current = output.read_text(encoding="utf-8") if output.exists() else None
        if current != generated:
            console.print(f"[red]{output} is out of date[/red] (regenerate from {source})")
            raise typer.Exit(1)
        console.print(f"[green]{output} is up to date[/green]")
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(generated, encoding="utf-8")
    log.info("Wrote %s", output)
