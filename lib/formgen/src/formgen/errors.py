"""Generation-time diagnostics.

Every error aborts the whole run: no partial module is ever emitted. Each
error points at the declaration that caused it.
"""

from __future__ import annotations

import ast


class GenerationError(Exception):
    """Base exception for all formgen errors."""

    def __init__(
        self,
        message: str,
        *,
        filename: str = "<unknown>",
        lineno: int | None = None,
        col_offset: int | None = None,
    ):
        self.message = message
        self.filename = filename
        self.lineno = lineno
        self.col_offset = col_offset
        super().__init__(message)

    @classmethod
    def at(cls, node: ast.AST, message: str, filename: str) -> "GenerationError":
        return cls(
            message,
            filename=filename,
            lineno=getattr(node, "lineno", None),
            col_offset=getattr(node, "col_offset", None),
        )

    @property
    def location(self) -> str:
        if self.lineno is None:
            return self.filename
        if self.col_offset is None:
            return f"{self.filename}:{self.lineno}"
        return f"{self.filename}:{self.lineno}:{self.col_offset + 1}"

    def __str__(self) -> str:
        return f"{self.location}: error: {self.message}"


class SelfParameterError(GenerationError):
    """Raised when an action declares a ``self`` receiver."""


class InvalidFormParameterPattern(GenerationError):
    """Raised when a form marker is placed on ``*args`` or ``**kwargs``."""


class ConfigurationError(GenerationError):
    """Raised for malformed scope configuration or marker arguments."""


class DuplicateActionError(GenerationError):
    """Raised when two actions in one module share an identifier."""


class DuplicateFieldNameError(GenerationError):
    """Raised when two form fields of one action share an external name."""


class PathParameterArityError(GenerationError):
    """Raised when an action cannot receive the configured path parameters."""


class ReservedNameError(GenerationError):
    """Raised when an action would be shadowed by a generated name."""
