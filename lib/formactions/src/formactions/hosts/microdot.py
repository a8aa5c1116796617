"""Microdot host adapter.

Used by generated ``ActionsHandler`` classes. Microdot has no application
state of its own, so the shared state is stored as an attribute of the
``Microdot`` instance:

    app = Microdot()
    app.post("/")(index_page.ActionsHandler().handle)
    install_state(app, AppState())
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from microdot import Request, Response, abort
from pydantic import BaseModel, ValidationError

from formactions.context import resolve_context
from formactions.exceptions import StateNotInstalledError

log = logging.getLogger(__name__)

STATE_ATTRIBUTE = "formactions_state"

M = TypeVar("M", bound=BaseModel)


def install_state(app: Any, state: Any) -> None:
    setattr(app, STATE_ATTRIBUTE, state)


def extract_state(request: Request, state_type: Any = None) -> Any:
    """Return the installed state; ``None`` is allowed only for untyped scopes."""
    state = getattr(request.app, STATE_ATTRIBUTE, None)
    if state_type is None:
        return state

    if state is None:
        raise StateNotInstalledError(state_type)
    if isinstance(state_type, type) and not isinstance(state, state_type):
        raise StateNotInstalledError(state_type)

    return state


def raw_query(request: Request) -> str | None:
    return request.query_string


async def decode_form(request: Request, model: type[M]) -> M:
    """Decode the urlencoded body into ``model``; aborts with 400 on mismatch."""
    form = request.form
    data = {key: form[key] for key in form} if form else {}
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        log.debug("Rejected form body for %s: %s", model.__name__, exc)
        abort(400, "Failed to deserialize form body")


async def context(
    annotation: Any,
    name: str,
    request: Request,
    state: Any,
) -> Any:
    return await resolve_context(
        annotation,
        name,
        request,
        state,
        request_type=Request,
        path_params=getattr(request, "url_args", None),
    )


def into_response(result: Any) -> Response:
    """Convert an action's return value, accepting Microdot's tuple convention."""
    if isinstance(result, Response):
        return result
    if result is None:
        return Response(status_code=204)
    if isinstance(result, tuple):
        return Response(*result)
    return Response(result)


def not_found(key: str | None = None) -> Response:
    log.debug("No action matches key %r", key)
    return Response("Action Not Found", status_code=404)
