from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lichess_bot.models.base import UserId
from lichess_bot.models.game import Color, GameInfo


@dataclass(frozen=True, slots=True)
class BotContext:
    """Who the bot is. Created once per run and shared by every top-level handler."""

    bot_id: UserId


def color_of(*, bot_id: UserId, info: GameInfo) -> Color | None:
    """The seat the bot plays in this game, or None if it is not a participant."""

    if info.white.id == bot_id:
        return Color.white
    if info.black.id == bot_id:
        return Color.black
    return None


@dataclass(frozen=True, slots=True)
class GameContext:
    """Per-game context: bot identity, its colour, and the immutable game info.

    Derived once from the gameFull record and shared by every handler of that game.
    Attributes of `GameInfo` are readable directly, e.g. `ctx.id` or `ctx.white`.
    """

    bot_id: UserId
    bot_color: Color | None
    info: GameInfo

    @classmethod
    def derive(cls, *, bot: BotContext, info: GameInfo) -> "GameContext":
        return cls(bot_id=bot.bot_id, bot_color=color_of(bot_id=bot.bot_id, info=info), info=info)

    @property
    def is_playing(self) -> bool:
        return self.bot_color is not None

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not fields; never recurse on `info` itself.
        if name == "info":
            raise AttributeError(name)
        return getattr(self.info, name)
