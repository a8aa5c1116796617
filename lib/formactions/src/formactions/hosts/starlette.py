"""Starlette host adapter.

Generated ``actions_handler`` functions call into this module for everything
that depends on Starlette: reading the raw query, decoding the form body,
extracting the shared state and building responses.

Shared state is installed once per application:

    app = Starlette(routes=[Route("/", page, methods=["GET"]),
                            Route("/", index_page.actions_handler, methods=["POST"])])
    install_state(app, AppState())
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from formactions.context import resolve_context
from formactions.exceptions import StateNotInstalledError

log = logging.getLogger(__name__)

STATE_ATTRIBUTE = "formactions_state"

M = TypeVar("M", bound=BaseModel)


def install_state(app: Any, state: Any) -> None:
    """Attach the shared state read by generated handlers to ``app.state``."""
    setattr(app.state, STATE_ATTRIBUTE, state)


def extract_state(request: Request, state_type: Any) -> Any:
    """Return the state installed on the request's application."""
    try:
        state = getattr(request.app.state, STATE_ATTRIBUTE)
    except AttributeError:
        raise StateNotInstalledError(state_type) from None

    if isinstance(state_type, type) and not isinstance(state, state_type):
        raise StateNotInstalledError(state_type)

    return state


def raw_query(request: Request) -> str:
    """The undecoded query string of the request."""
    return request.scope.get("query_string", b"").decode("latin-1")


async def decode_form(request: Request, model: type[M]) -> M:
    """Decode an ``application/x-www-form-urlencoded`` body into ``model``.

    Raises:
        HTTPException: 422 when the body does not match the model.
    """
    form = await request.form()
    try:
        return model.model_validate(dict(form))
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=f"Failed to deserialize form body: {exc}",
        ) from exc


async def context(annotation: Any, name: str, request: Request, state: Any) -> Any:
    """Resolve a context argument, falling back to the route's path parameters."""
    return await resolve_context(
        annotation,
        name,
        request,
        state,
        request_type=Request,
        path_params=request.path_params,
    )


def into_response(result: Any) -> Response:
    """Convert an action's return value into a Starlette response."""
    if isinstance(result, Response):
        return result
    if result is None:
        return Response(status_code=204)
    if isinstance(result, str):
        return PlainTextResponse(result)
    if isinstance(result, bytes):
        return Response(result, media_type="application/octet-stream")
    return JSONResponse(result)


def not_found(key: str | None = None) -> Response:
    log.debug("No action matches key %r", key)
    return PlainTextResponse("Action Not Found", status_code=404)
