"""Markers read by the ``formgen`` generator.

Both markers are inert at runtime, so an actions module still imports
before it has been processed. The generator strips them from its output.

Usage:
    from typing import Annotated

    from formactions import action, form

    @action
    async def add_value(value: Annotated[int, form(rename="v")], state: AppState):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

F = TypeVar("F", bound=Callable)


def action(func: F) -> F:
    """Mark a module-level function as a form action."""
    return func


@dataclass(frozen=True)
class form:
    """Mark a parameter as a form field, optionally under another field name."""

    rename: str | None = None
