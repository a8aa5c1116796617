"""formactions Exceptions

Runtime errors raised by generated dispatchers and host adapters.
"""

from __future__ import annotations


class FormActionsError(Exception):
    """Base exception for all formactions runtime errors."""

    pass


class ContextArgumentError(FormActionsError):
    """Raised when a context argument cannot be supplied by the host."""

    def __init__(self, name: str, annotation: object = None):
        self.name = name
        self.annotation = annotation
        super().__init__(f"Cannot resolve context argument: {name}")


class StateNotInstalledError(FormActionsError):
    """Raised when a dispatcher needs shared state that was never installed."""

    def __init__(self, state_type: object):
        self.state_type = state_type
        name = getattr(state_type, "__name__", repr(state_type))
        super().__init__(f"No state of type {name} installed on the application")
