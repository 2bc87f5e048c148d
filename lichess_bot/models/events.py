from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, model_validator

from lichess_bot.models.base import Compat, GameId, Milliseconds, Seconds, WireModel
from lichess_bot.models.challenge import Challenge, ChallengeDeclined
from lichess_bot.models.chat import ChatLine, ChatRoom
from lichess_bot.models.game import Color, GameInfo, GameStatus, StatusObject


class GameEventSource(StrEnum):
    lobby = "lobby"
    friend = "friend"
    ai = "ai"
    api = "api"
    tournament = "tournament"
    position = "position"
    import_ = "import"
    import_live = "importlive"
    simul = "simul"
    relay = "relay"
    pool = "pool"
    swiss = "swiss"


# ---- bot event stream (/stream/event) ----


class GameStartFinish(WireModel):
    """Game summary attached to gameStart/gameFinish. The server may send any subset of it."""

    id: GameId | None = None
    source: GameEventSource | None = None
    status: StatusObject = None
    winner: Color | None = None
    compat: Compat | None = None


class GameStartEvent(WireModel):
    type: Literal["gameStart"] = "gameStart"
    game: GameStartFinish


class GameFinishEvent(WireModel):
    type: Literal["gameFinish"] = "gameFinish"
    game: GameStartFinish


class ChallengeEvent(WireModel):
    type: Literal["challenge"] = "challenge"
    challenge: Challenge


class ChallengeCanceledEvent(WireModel):
    type: Literal["challengeCanceled"] = "challengeCanceled"
    challenge: Challenge


class ChallengeDeclinedEvent(WireModel):
    type: Literal["challengeDeclined"] = "challengeDeclined"
    challenge: ChallengeDeclined


BotEvent = Annotated[
    Union[GameStartEvent, GameFinishEvent, ChallengeEvent, ChallengeCanceledEvent, ChallengeDeclinedEvent],
    Field(discriminator="type"),
]

BOT_EVENT_ADAPTER: TypeAdapter[BotEvent] = TypeAdapter(BotEvent)


# ---- game stream (/bot/game/stream/{id}) ----


class GameStateEvent(WireModel):
    """Current state of a game. Immutable game data is not repeated here."""

    type: Literal["gameState"] = "gameState"
    # Moves in UCI notation, space separated.
    moves: str
    white_time: Milliseconds = Field(alias="wtime")
    black_time: Milliseconds = Field(alias="btime")
    white_increment: Milliseconds = Field(alias="winc")
    black_increment: Milliseconds = Field(alias="binc")
    status: GameStatus
    winner: Color | None = None
    white_draw_offer: bool = Field(default=False, alias="wdraw")
    black_draw_offer: bool = Field(default=False, alias="bdraw")
    white_take_back_proposal: bool = Field(default=False, alias="wtakeback")
    black_take_back_proposal: bool = Field(default=False, alias="btakeback")

    @property
    def move_list(self) -> list[str]:
        return self.moves.split()


class GameFullEvent(WireModel):
    """First record of every game stream: the game info flattened next to the initial state."""

    type: Literal["gameFull"] = "gameFull"
    info: GameInfo
    state: GameStateEvent

    @model_validator(mode="before")
    @classmethod
    def _nest_info(cls, data: Any) -> Any:
        if isinstance(data, dict) and "info" not in data:
            info = {k: v for k, v in data.items() if k not in ("type", "state")}
            return {"type": data.get("type", "gameFull"), "info": info, "state": data.get("state")}
        return data


class ChatLineEvent(WireModel):
    type: Literal["chatLine"] = "chatLine"
    room: ChatRoom
    username: str
    text: str

    @property
    def chat_line(self) -> ChatLine:
        return ChatLine(username=self.username, text=self.text)


class OpponentGoneEvent(WireModel):
    """Whether the opponent left the game, and how long until a win or draw can be claimed."""

    type: Literal["opponentGone"] = "opponentGone"
    gone: bool
    claim_win_in_seconds: Seconds | None = None


GameEvent = Annotated[
    Union[GameFullEvent, GameStateEvent, ChatLineEvent, OpponentGoneEvent],
    Field(discriminator="type"),
]

GAME_EVENT_ADAPTER: TypeAdapter[GameEvent] = TypeAdapter(GameEvent)


def decode_bot_event(raw: str | bytes) -> BotEvent:
    return BOT_EVENT_ADAPTER.validate_json(raw)


def decode_game_event(raw: str | bytes) -> GameEvent:
    return GAME_EVENT_ADAPTER.validate_json(raw)
