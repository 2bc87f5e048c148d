from __future__ import annotations

from statemachine import State, StateMachine

from lichess_bot.core.context import GameContext
from lichess_bot.models.base import GameId


class GameStreamFSM(StateMachine):
    """Lifecycle of one game stream.

    - awaiting_full -> streaming: the gameFull record arrived and the GameContext was derived.
    - streaming -> streaming: any later record.
    - awaiting_full/streaming -> finished: the server closed the stream.

    Any other sequence (a record before gameFull, a second gameFull) is refused by the machine
    with `TransitionNotAllowed`; the run loop turns that into a protocol violation.
    """

    awaiting_full = State("awaiting_full", value="awaiting_full", initial=True)
    streaming = State("streaming", value="streaming")
    finished = State("finished", value="finished", final=True)

    game_full_received = awaiting_full.to(streaming)
    game_event_received = streaming.to.itself()
    stream_ended = awaiting_full.to(finished) | streaming.to(finished)

    def __init__(self, game_id: GameId):
        self.game_id = game_id
        self.game_context: GameContext | None = None
        super().__init__()

    def on_game_full_received(self, game_context: GameContext) -> None:
        # Set exactly once; the machine never re-enters awaiting_full.
        self.game_context = game_context
