"""Actions of a per-board message page: ``/boards/<int:board_id>``."""

from typing import Annotated

from microdot import Request

from formactions import action, form

__actions__ = {
    "state": "BoardState",
    "microdot": {"path_parameters": ["int"]},
}


class BoardState:
    def __init__(self) -> None:
        self.boards: dict[int, list[str]] = {}

    def messages(self, board_id: int) -> list[str]:
        return self.boards.setdefault(board_id, [])


@action
async def post_message(
    board_id: int,
    state: BoardState,
    message: Annotated[str, form(rename="msg")],
):
    state.messages(board_id).append(message)
    return {"board": board_id, "messages": state.messages(board_id)}


@action
async def delete_last(board_id: int, request: Request, state: BoardState):
    messages = state.messages(board_id)
    if not messages:
        return "Board is empty", 409
    removed = messages.pop()
    return {"board": board_id, "removed": removed, "path": request.path}
