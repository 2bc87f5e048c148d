from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from statemachine.exceptions import TransitionNotAllowed

from lichess_bot.bot import Bot
from lichess_bot.client import BotClient
from lichess_bot.core.context import BotContext, GameContext
from lichess_bot.errors import ProtocolViolation, StreamDecodeError
from lichess_bot.fsm import GameStreamFSM
from lichess_bot.models.base import GameId
from lichess_bot.models.events import (
    BotEvent,
    ChallengeCanceledEvent,
    ChallengeDeclinedEvent,
    ChallengeEvent,
    ChatLineEvent,
    GameEvent,
    GameFinishEvent,
    GameFullEvent,
    GameStartEvent,
    GameStateEvent,
    OpponentGoneEvent,
)
from lichess_bot.ndjson import MalformedRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _leaf_errors(group: BaseExceptionGroup) -> list[BaseException]:
    leaves: list[BaseException] = []
    for exc in group.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            leaves.extend(_leaf_errors(exc))
        else:
            leaves.append(exc)
    return leaves


class Dispatcher:
    """Consumes the bot event stream and the game streams it triggers.

    Every decoded record becomes its own task: handlers run concurrently, unbounded, and in no
    guaranteed order, so a slow handler in one game never delays events of another.
    Records are still read off each stream strictly in wire order.

    A failing task ends only itself. A handler exception or a failed request is logged and
    collected in `failures`. A protocol violation or an undecodable record on a game stream
    ends that game's loop and nothing else. Only an undecodable record on the bot event stream
    ends the whole run. `skip_malformed=True` logs and skips undecodable records instead.
    """

    def __init__(self, *, bot: Bot, client: BotClient, skip_malformed: bool = False) -> None:
        self.bot = bot
        self.client = client
        self.skip_malformed = skip_malformed
        self.failures: list[BaseException] = []

    def _accept(self, record: T | MalformedRecord) -> T | None:
        if not isinstance(record, MalformedRecord):
            return record
        if self.skip_malformed:
            logger.warning("Skipping undecodable stream record %r: %s", record.line, record.error)
            return None
        raise StreamDecodeError(record.line, record.error)

    async def _isolated(self, work: Awaitable[None], what: str) -> None:
        try:
            await work
        except Exception as e:
            errors = _leaf_errors(e) if isinstance(e, ExceptionGroup) else [e]
            for err in errors:
                logger.error("%s failed: %r", what, err, exc_info=err)
            self.failures.extend(errors)

    async def run(self, ctx: BotContext) -> None:
        async with self.client.stream_bot_events() as records:
            async with asyncio.TaskGroup() as tasks:
                async for record in records:
                    event = self._accept(record)
                    if event is None:
                        continue
                    logger.debug("Dispatching %s", event.type)
                    tasks.create_task(
                        self._isolated(self.dispatch_bot_event(event, ctx), f"{event.type} handler")
                    )

    async def dispatch_bot_event(self, event: BotEvent, ctx: BotContext) -> None:
        bot, client = self.bot, self.client

        if isinstance(event, GameStartEvent):
            await bot.on_game_start(event=event.game, ctx=ctx, client=client)
            if event.game.id is not None:
                # The whole game lifecycle stays inside this task.
                await self.run_game(event.game.id, ctx)
        elif isinstance(event, GameFinishEvent):
            await bot.on_game_finish(event=event.game, ctx=ctx, client=client)
        elif isinstance(event, ChallengeEvent):
            await bot.on_challenge(event=event.challenge, ctx=ctx, client=client)
        elif isinstance(event, ChallengeCanceledEvent):
            await bot.on_challenge_canceled(event=event.challenge, ctx=ctx, client=client)
        elif isinstance(event, ChallengeDeclinedEvent):
            await bot.on_challenge_declined(event=event.challenge, ctx=ctx, client=client)

    async def run_game(self, game_id: GameId, bot_ctx: BotContext) -> None:
        fsm = GameStreamFSM(game_id)
        game_ctx: GameContext | None = None

        async with self.client.stream_game_events(game_id) as records:
            async with asyncio.TaskGroup() as tasks:
                async for record in records:
                    event = self._accept(record)
                    if event is None:
                        continue

                    if isinstance(event, GameFullEvent):
                        try:
                            fsm.game_full_received(game_context=GameContext.derive(bot=bot_ctx, info=event.info))
                        except TransitionNotAllowed as e:
                            raise ProtocolViolation(game_id, "received a second gameFull record") from e
                        game_ctx = fsm.game_context
                        logger.info("Game %s started, playing as %s", game_id, game_ctx.bot_color)
                        # The initial state is handled before anything else of this game.
                        await self._isolated(
                            self.dispatch_game_event(event.state, game_ctx), f"game {game_id} gameState handler"
                        )
                        continue

                    try:
                        fsm.game_event_received()
                    except TransitionNotAllowed as e:
                        raise ProtocolViolation(game_id, f"received {event.type} before gameFull") from e
                    logger.debug("Dispatching %s for game %s", event.type, game_id)
                    tasks.create_task(
                        self._isolated(self.dispatch_game_event(event, game_ctx), f"game {game_id} {event.type} handler")
                    )

        fsm.stream_ended()
        logger.info("Game stream %s ended", game_id)

    async def dispatch_game_event(self, event: GameEvent, ctx: GameContext) -> None:
        bot, client = self.bot, self.client

        if isinstance(event, GameStateEvent):
            await bot.on_game_state(event=event, ctx=ctx, client=client)
        elif isinstance(event, ChatLineEvent):
            await bot.on_chat_line(event=event, ctx=ctx, client=client)
        elif isinstance(event, OpponentGoneEvent):
            await bot.on_opponent_gone(event=event, ctx=ctx, client=client)


async def run(bot: Bot, client: BotClient, *, skip_malformed: bool = False) -> list[BaseException]:
    """Run `bot` until the bot event stream ends.

    Resolves the bot's own account first; if that fails there is nothing meaningful to dispatch
    and the error propagates. After that, failures of single handlers and game loops are logged
    and returned once every task has finished; they never stop other games. An undecodable
    record or a read error on the bot event stream itself cancels everything and is raised
    (`StreamDecodeError`, `NetworkError`).
    """

    profile = await client.get_my_profile()
    ctx = BotContext(bot_id=profile.id)
    logger.info("Running as %s (%s)", profile.username, profile.id)

    dispatcher = Dispatcher(bot=bot, client=client, skip_malformed=skip_malformed)
    try:
        await dispatcher.run(ctx)
    except ExceptionGroup as group:
        errors = _leaf_errors(group)
        for err in errors:
            logger.error("Run failed: %r", err)
        raise errors[0]
    logger.info("Bot event stream ended with %d failed task(s)", len(dispatcher.failures))
    return dispatcher.failures
