"""Declaration extraction: actions module source -> ActionRegistry."""

from formgen.ast.extractor import Extraction, Extractor
from formgen.ast.spec import (
    Action,
    ActionRegistry,
    ContextArgument,
    FormField,
    ParameterKind,
)

__all__ = [
    "Extractor",
    "Extraction",
    "Action",
    "ActionRegistry",
    "ContextArgument",
    "FormField",
    "ParameterKind",
]
