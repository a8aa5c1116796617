"""Inspect command - list the actions of a module"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.table import Table

from formgen import resolve_config
from formgen.ast import Action, Extractor

from ..lib.errors import handle_error
from .utils import console, read_overrides, setup_logging


def _form_fields(action: Action) -> str:
    fields = []
    for field in action.form:
        name = field.ident
        if field.rename is not None:
            name = f"{field.ident} -> {field.external_name}"
        fields.append(escape(f"{name}: {field.annotation}"))
    return "\n".join(fields) or "[dim]-[/dim]"


def _context(action: Action) -> str:
    arguments = [
        escape(f"{argument.ident}: {argument.annotation}")
        if argument.annotation
        else argument.ident
        for argument in action.context
    ]
    return "\n".join(arguments) or "[dim]-[/dim]"


def inspect_command(source: Path, config: Optional[Path] = None) -> None:
    """Show the actions declared in SOURCE."""
    setup_logging()

    try:
        extraction = Extractor(str(source)).extract(source.read_text(encoding="utf-8"))
        scope = resolve_config(extraction, read_overrides(config), filename=str(source))
    except Exception as exc:
        handle_error(exc)

    if not len(extraction.registry):
        console.print("[yellow]No actions found[/yellow]")

    table = Table(title=escape(str(source)))
    table.add_column("Action", style="cyan")
    table.add_column("Route")
    table.add_column("Form fields")
    table.add_column("Context")

    for action in extraction.registry:
        ident = action.ident if action.is_async else f"{action.ident} [dim](sync)[/dim]"
        table.add_row(ident, action.route, _form_fields(action), _context(action))

    if len(extraction.registry):
        console.print(table)

    backends = ", ".join(
        f"{name} ({backend.handler})" for name, backend in scope.backends.items()
    )
    console.print(f"[dim]State:[/dim] {escape(scope.state or '-')}")
    console.print(f"[dim]Dispatchers:[/dim] {backends or '-'}")
