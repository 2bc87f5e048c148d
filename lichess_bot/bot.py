from __future__ import annotations

from typing import TYPE_CHECKING

from lichess_bot.core.context import BotContext, GameContext
from lichess_bot.models.challenge import Challenge, ChallengeDeclined
from lichess_bot.models.events import ChatLineEvent, GameStartFinish, GameStateEvent, OpponentGoneEvent

if TYPE_CHECKING:
    from lichess_bot.client import BotClient


class Bot:
    """Callbacks invoked by the run loop, one per event kind.

    Every method is a no-op by default, so subclasses override only what they care about.
    Handlers run concurrently with each other. An exception raised here is logged and ends only
    the task that raised it; `run` returns all of them once the bot event stream has ended.
    The client is passed in so handlers can react, e.g. accept a challenge from `on_challenge`.
    """

    # ---- bot event stream ----

    async def on_game_start(self, *, event: GameStartFinish, ctx: BotContext, client: BotClient) -> None:
        """Called before the game's own stream is opened."""

    async def on_game_finish(self, *, event: GameStartFinish, ctx: BotContext, client: BotClient) -> None:
        pass

    async def on_challenge(self, *, event: Challenge, ctx: BotContext, client: BotClient) -> None:
        pass

    async def on_challenge_canceled(self, *, event: Challenge, ctx: BotContext, client: BotClient) -> None:
        pass

    async def on_challenge_declined(self, *, event: ChallengeDeclined, ctx: BotContext, client: BotClient) -> None:
        pass

    # ---- game streams ----

    async def on_game_state(self, *, event: GameStateEvent, ctx: GameContext, client: BotClient) -> None:
        """Called for the initial state embedded in gameFull and for every later gameState."""

    async def on_chat_line(self, *, event: ChatLineEvent, ctx: GameContext, client: BotClient) -> None:
        pass

    async def on_opponent_gone(self, *, event: OpponentGoneEvent, ctx: GameContext, client: BotClient) -> None:
        pass
