"""Action model built by the extractor.

All types are frozen: the registry is built once per generation run and
only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union


class ParameterKind(str, Enum):
    """How a parameter is bound when the action is called."""

    POSITIONAL = "positional"
    KEYWORD = "keyword"
    VARIADIC = "variadic"


@dataclass(frozen=True)
class FormField:
    """A parameter populated from the decoded form body."""

    ident: str
    annotation: str
    position: int
    kind: ParameterKind = ParameterKind.POSITIONAL
    rename: Optional[str] = None
    default: Optional[str] = None

    @property
    def form_name(self) -> str:
        """Name of the metadata constant, e.g. ``value_name``."""
        return f"{self.ident}_name"

    @property
    def external_name(self) -> str:
        """The HTML field name, shared by metadata and decoder."""
        return self.rename if self.rename is not None else self.ident


@dataclass(frozen=True)
class ContextArgument:
    """A parameter supplied by the host framework, never by form data."""

    ident: str
    position: int
    kind: ParameterKind = ParameterKind.POSITIONAL
    annotation: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.kind is ParameterKind.VARIADIC


Parameter = Union[FormField, ContextArgument]


@dataclass(frozen=True)
class Action:
    """A function that handles one kind of form submission."""

    ident: str
    form: tuple[FormField, ...] = ()
    context: tuple[ContextArgument, ...] = ()
    is_async: bool = True
    lineno: Optional[int] = None
    col_offset: Optional[int] = None

    @property
    def route(self) -> str:
        """Value of the HTML ``action`` attribute."""
        return f"?/{self.ident}"

    @property
    def route_match(self) -> str:
        """Action key matched against the resolved query token."""
        return f"/{self.ident}"

    @property
    def parameters(self) -> List[Parameter]:
        """Form fields and context arguments in declaration order."""
        return sorted([*self.form, *self.context], key=lambda p: p.position)

    @property
    def bound_context(self) -> List[ContextArgument]:
        """Context arguments that receive a value (variadics do not)."""
        return [arg for arg in self.context if not arg.is_placeholder]


@dataclass(frozen=True)
class ActionRegistry:
    """Ordered actions of one module."""

    actions: tuple[Action, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def get(self, ident: str) -> Optional[Action]:
        for action in self.actions:
            if action.ident == ident:
                return action
        return None
