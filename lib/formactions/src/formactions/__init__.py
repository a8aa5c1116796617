"""formactions - HTML form actions for async Python web frameworks.

Runtime support for modules processed by ``formgen``: the action key
resolver, the ``action``/``form`` markers and context argument resolution.
Host specific helpers live in ``formactions.hosts``.
"""

from formactions.context import FromRequest, resolve_context
from formactions.exceptions import (
    ContextArgumentError,
    FormActionsError,
    StateNotInstalledError,
)
from formactions.markers import action, form
from formactions.query import query_action

__all__ = [
    # markers
    "action",
    "form",
    # dispatch
    "query_action",
    "FromRequest",
    "resolve_context",
    # errors
    "FormActionsError",
    "ContextArgumentError",
    "StateNotInstalledError",
]
