"""Message boards served by Microdot.

Run with:
    python app.py
"""

from pathlib import Path

from jinja2 import Environment
from microdot import Microdot

import formgen
from formactions.hosts.microdot import install_state

board_actions = formgen.load_module(
    Path(__file__).with_name("board_actions.py"),
    module_name="microdot_board_actions",
)

post_message = board_actions.post_message.FORM

# Messages are user input; autoescape keeps them inert.
BOARD_PAGE = Environment(autoescape=True).from_string(
    """<!doctype html>
<ul>
{%- for message in messages %}<li>{{ message }}</li>{% endfor -%}
</ul>
<form method="post" action="{{ form.action }}">
  <input name="{{ form.message_name }}" required>
  <button>Post</button>
</form>
"""
)


def create_app() -> Microdot:
    app = Microdot()

    @app.get("/boards/<int:board_id>")
    async def board(request, board_id):
        state = request.app.formactions_state
        body = BOARD_PAGE.render(messages=state.messages(board_id), form=post_message)
        return body, 200, {"Content-Type": "text/html; charset=UTF-8"}

    app.post("/boards/<int:board_id>")(board_actions.ActionsHandler().handle)
    install_state(app, board_actions.BoardState())
    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
