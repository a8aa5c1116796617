"""Compiler IR spec - generated module intermediate representation."""

import ast
from dataclasses import dataclass, field
from typing import List

from formgen.ast.spec import Action, FormField


GENERATED_HEADER = """\
# This module was generated by formgen from {source}.
# Do not edit it by hand: change the source module and regenerate.
"""

GENERATED_SECTION = "# --- formgen: generated form actions ---"

# Prefix of every local and parameter of a generated dispatcher.
LOCAL_PREFIX = "_fa_"


@dataclass
class FormDescriptor:
    """Metadata and decode model of a single action."""

    action: Action
    metadata_class: str  # e.g., "_Form_add_value"
    decoder_class: str  # e.g., "_FormData_add_value"
    source: str = ""  # rendered metadata block

    @property
    def route(self) -> str:
        return self.action.route

    @property
    def route_match(self) -> str:
        return self.action.route_match

    @property
    def fields(self) -> tuple[FormField, ...]:
        return self.action.form


@dataclass
class Dispatcher:
    """A dispatcher emitted for one host framework."""

    backend: str  # e.g., "starlette"
    handler: str  # e.g., "actions_handler"
    source: str  # rendered definition
    imports: List[str] = field(default_factory=list)


@dataclass
class GeneratedScope:
    """Complete generated module IR."""

    declarations: ast.Module  # original module, markers stripped
    source_name: str = "<unknown>"
    imports: List[str] = field(default_factory=list)
    descriptors: List[FormDescriptor] = field(default_factory=list)
    dispatchers: List[Dispatcher] = field(default_factory=list)


@dataclass
class ContextSlot:
    """A context argument resolved through the host at request time."""

    local: str  # e.g., "context_values"
    name: str  # parameter name
    annotation: str  # expression passed to the resolver, "None" if absent


@dataclass
class Branch:
    """One ``case`` of the dispatch ``match`` statement."""

    route_match: str  # e.g., "/add_value"
    decoder: str  # decode model class name
    call: str  # call expression of the action
    is_async: bool = True
    context: List[ContextSlot] = field(default_factory=list)
