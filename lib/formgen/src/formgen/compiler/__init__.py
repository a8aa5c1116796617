"""Compilation: ActionRegistry -> generated module source."""

from formgen.compiler.backends import BACKENDS, Backend, get_backend
from formgen.compiler.compiler import Compiler
from formgen.compiler.renderer import Renderer
from formgen.compiler.spec import (
    Branch,
    ContextSlot,
    Dispatcher,
    FormDescriptor,
    GeneratedScope,
)

__all__ = [
    "BACKENDS",
    "Backend",
    "Branch",
    "Compiler",
    "ContextSlot",
    "Dispatcher",
    "FormDescriptor",
    "GeneratedScope",
    "Renderer",
    "get_backend",
]
