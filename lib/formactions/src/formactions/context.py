"""Context argument resolution.

Context arguments are the action parameters that are not form fields. The
generated dispatchers ask the host adapter for each of them, passing the
parameter's annotation and name. Resolution order:

1. the annotation implements ``FromRequest`` (a ``from_request`` classmethod),
2. the annotation is the host's request type,
3. the annotation matches the installed shared state,
4. the parameter is named ``request`` or ``state``,
5. the name is one of the host's path parameters.
"""

from __future__ import annotations

import inspect
from typing import Any, Mapping, Protocol, runtime_checkable

from formactions.exceptions import ContextArgumentError


@runtime_checkable
class FromRequest(Protocol):
    """A type that knows how to build itself from a request and the state.

    Example:
        class Values:
            def __init__(self, values: list[int]):
                self.values = values

            @classmethod
            async def from_request(cls, request, state: AppState) -> "Values":
                return cls(state.values)
    """

    @classmethod
    async def from_request(cls, request: Any, state: Any) -> Any: ...


def _is_instance(value: Any, annotation: Any) -> bool:
    # Generic aliases and typing constructs are not valid isinstance targets.
    try:
        return isinstance(value, annotation)
    except TypeError:
        return False


def _is_subclass(cls: type, annotation: Any) -> bool:
    if not inspect.isclass(annotation):
        return False
    try:
        return issubclass(cls, annotation)
    except TypeError:
        return False


async def resolve_context(
    annotation: Any,
    name: str,
    request: Any,
    state: Any,
    *,
    request_type: type,
    path_params: Mapping[str, Any] | None = None,
) -> Any:
    """Resolve one context argument for a dispatched action."""
    if annotation is not None:
        from_request = getattr(annotation, "from_request", None)
        if callable(from_request):
            value = from_request(request, state)
            if inspect.isawaitable(value):
                value = await value
            return value

        if _is_subclass(request_type, annotation):
            return request

        if state is not None and _is_instance(state, annotation):
            return state

    if name == "request":
        return request
    if name == "state":
        return state
    if path_params is not None and name in path_params:
        return path_params[name]

    raise ContextArgumentError(name, annotation)
