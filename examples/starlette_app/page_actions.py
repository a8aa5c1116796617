"""Actions of the counter page.

Processed by formgen at import time (see ``app.py``), or ahead of time with
``formgen generate page_actions.py``.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Annotated

from starlette.requests import Request
from starlette.responses import RedirectResponse

from formactions import action, form

__actions__ = {"state": "AppState", "starlette": True}


@dataclass
class AppState:
    values: list[int] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class Values:
    """The stored values, guarded by the state's lock."""

    def __init__(self, state: AppState):
        self.items = state.values
        self.lock = state.lock

    @classmethod
    async def from_request(cls, request: Request, state: AppState) -> "Values":
        return cls(state)


@action
async def add_value(values: Values, value: Annotated[int, form()]):
    async with values.lock:
        values.items.append(value)
    return RedirectResponse("/", status_code=303)


@action
async def clear(values: Values, confirm: Annotated[str, form(rename="confirm-clear")] = ""):
    if confirm != "yes":
        return "Nothing cleared"
    async with values.lock:
        values.items.clear()
    return RedirectResponse("/", status_code=303)


@action
def total(state: AppState):
    return {"total": sum(state.values), "count": len(state.values)}
