"""Concurrent requests against generated handlers."""

import asyncio
import textwrap

import httpx
import pytest
from starlette.applications import Starlette
from starlette.routing import Route

import formgen
from formactions.hosts.starlette import install_state

SOURCE = textwrap.dedent(
    """
    import asyncio
    from typing import Annotated

    from formactions import action, form

    __actions__ = {"state": "AppState", "starlette": True}


    class AppState:
        def __init__(self):
            self.values = []
            self.lock = asyncio.Lock()


    class Values:
        def __init__(self, state):
            self.state = state

        @classmethod
        async def from_request(cls, request, state):
            return cls(state)


    @action
    async def add_value(values: Values, value: Annotated[int, form()]):
        async with values.state.lock:
            current = list(values.state.values)
            await asyncio.sleep(0)
            values.state.values = current + [value]
        return {"count": len(values.state.values)}
    """
)

APPS = 4
REQUESTS = 25


@pytest.fixture(scope="module")
def actions():
    return formgen.load_source(SOURCE, "concurrency_actions")


def create_app(actions):
    app = Starlette(routes=[Route("/", actions.actions_handler, methods=["POST"])])
    state = actions.AppState()
    install_state(app, state)
    return app, state


async def hammer(app, offset):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        responses = await asyncio.gather(
            *(
                client.post("/?/add_value", data={"value": str(offset + i)})
                for i in range(REQUESTS)
            )
        )
    return [r.status_code for r in responses]


def test_states_are_isolated(actions):
    apps = [create_app(actions) for _ in range(APPS)]

    async def main():
        return await asyncio.gather(
            *(hammer(app, n * 1000) for n, (app, _) in enumerate(apps))
        )

    statuses = asyncio.run(main())

    assert all(code == 200 for codes in statuses for code in codes)
    for n, (_, state) in enumerate(apps):
        assert sorted(state.values) == [n * 1000 + i for i in range(REQUESTS)]
