from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv

from lichess_bot.bot import Bot
from lichess_bot.client import BotClient
from lichess_bot.config import client_from_settings, settings_from_env
from lichess_bot.core.context import BotContext, GameContext
from lichess_bot.models.challenge import Challenge, DeclineReason
from lichess_bot.models.chat import ChatRoom
from lichess_bot.models.events import ChatLineEvent, GameStartFinish, GameStateEvent, OpponentGoneEvent
from lichess_bot.models.game import Variant
from lichess_bot.run_loop import run

logger = logging.getLogger(__name__)


class LoggingBot(Bot):
    """Small demo bot: logs everything, plays only standard chess, says hello."""

    greeting = "Hi! I only log your moves, good luck."

    async def on_challenge(self, *, event: Challenge, ctx: BotContext, client: BotClient) -> None:
        logger.info("Challenge %s from %s (%s)", event.id, event.challenger.name, event.variant)
        if event.variant in (None, Variant.standard):
            await client.accept_challenge(event.id)
        else:
            await client.decline_challenge(event.id, DeclineReason.variant)

    async def on_challenge_canceled(self, *, event: Challenge, ctx: BotContext, client: BotClient) -> None:
        logger.info("Challenge %s canceled", event.id)

    async def on_game_start(self, *, event: GameStartFinish, ctx: BotContext, client: BotClient) -> None:
        logger.info("Game %s starting", event.id)
        if event.id is not None:
            await client.send_chat_message(event.id, ChatRoom.player, self.greeting)

    async def on_game_finish(self, *, event: GameStartFinish, ctx: BotContext, client: BotClient) -> None:
        logger.info("Game %s finished: %s, winner %s", event.id, event.status, event.winner)

    async def on_game_state(self, *, event: GameStateEvent, ctx: GameContext, client: BotClient) -> None:
        logger.info("Game %s: %d moves, status %s", ctx.id, len(event.move_list), event.status)

    async def on_chat_line(self, *, event: ChatLineEvent, ctx: GameContext, client: BotClient) -> None:
        logger.info("Game %s chat [%s] %s: %s", ctx.id, event.room, event.username, event.text)

    async def on_opponent_gone(self, *, event: OpponentGoneEvent, ctx: GameContext, client: BotClient) -> None:
        logger.info("Game %s: opponent gone=%s", ctx.id, event.gone)


async def _amain() -> None:
    async with client_from_settings(settings_from_env()) as client:
        await run(LoggingBot(), client)


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(_amain())


if __name__ == "__main__":
    main()
