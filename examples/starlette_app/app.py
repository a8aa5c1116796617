"""Counter page served by Starlette.

Run with:
    uvicorn app:app --reload
"""

from pathlib import Path

from jinja2 import Environment
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse
from starlette.routing import Route

import formgen
from formactions.hosts.starlette import install_state

page_actions = formgen.load_module(
    Path(__file__).with_name("page_actions.py"),
    module_name="starlette_page_actions",
)

add_value = page_actions.add_value.FORM
clear = page_actions.clear.FORM


PAGE = Environment(autoescape=True).from_string(
    """<!doctype html>
<ul>
{%- for value in values %}<li>{{ value }}</li>{% endfor -%}
</ul>
<form method="post" action="{{ add_value.action }}">
  <input type="number" name="{{ add_value.value_name }}" required>
  <button>Add</button>
</form>
<form method="post" action="{{ clear.action }}">
  <input type="hidden" name="{{ clear.confirm_name }}" value="yes">
  <button>Clear</button>
</form>
"""
)


async def page(request: Request) -> HTMLResponse:
    state = request.app.state.formactions_state
    return HTMLResponse(
        PAGE.render(values=state.values, add_value=add_value, clear=clear)
    )


def create_app() -> Starlette:
    app = Starlette(
        routes=[
            Route("/", page, methods=["GET"]),
            Route("/", page_actions.actions_handler, methods=["POST"]),
        ]
    )
    install_state(app, page_actions.AppState())
    return app


app = create_app()
