from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from lichess_bot.models.base import Fen, GameId, Seconds, Timestamp, TournamentId, UserId, WireModel
from lichess_bot.models.user import Title


class Color(StrEnum):
    white = "white"
    black = "black"


class GameStatus(StrEnum):
    created = "created"
    started = "started"
    aborted = "aborted"
    mate = "mate"
    resign = "resign"
    stalemate = "stalemate"
    timeout = "timeout"
    draw = "draw"
    out_of_time = "outoftime"
    cheat = "cheat"
    no_start = "noStart"
    unknown_finish = "unknownFinish"
    variant_end = "variantEnd"

    @property
    def is_running(self) -> bool:
        """True while no decision has been reached and moves can still be played."""

        return self in (GameStatus.created, GameStatus.started)


_STATUS_BY_ID: dict[int, GameStatus] = {
    10: GameStatus.created,
    20: GameStatus.started,
    25: GameStatus.aborted,
    30: GameStatus.mate,
    31: GameStatus.resign,
    32: GameStatus.stalemate,
    33: GameStatus.timeout,
    34: GameStatus.draw,
    35: GameStatus.out_of_time,
    36: GameStatus.cheat,
    37: GameStatus.no_start,
    38: GameStatus.unknown_finish,
    60: GameStatus.variant_end,
}

_STATUS_BY_NAME: dict[str, GameStatus] = {s.value: s for s in GameStatus}


class GameStatusError(ValueError):
    pass


class UnknownStatusIdError(GameStatusError):
    def __init__(self, status_id: int) -> None:
        super().__init__(f"unknown game status ID `{status_id}`")
        self.status_id = status_id


class UnknownStatusNameError(GameStatusError):
    def __init__(self, name: str) -> None:
        super().__init__(f"unknown game status name `{name}`")
        self.name = name


class StatusIdNameMismatchError(GameStatusError):
    def __init__(self, status_id: int, name: str) -> None:
        super().__init__(f"game status ID `{status_id}` does not match name `{name}`")
        self.status_id = status_id
        self.name = name


def game_status_from_id(status_id: int) -> GameStatus:
    # Unhashable ids (lists, objects) are just as unknown as unlisted numbers.
    try:
        return _STATUS_BY_ID[status_id]
    except (KeyError, TypeError):
        raise UnknownStatusIdError(status_id) from None


def game_status_from_name(name: str) -> GameStatus:
    try:
        return _STATUS_BY_NAME[name]
    except (KeyError, TypeError):
        raise UnknownStatusNameError(name) from None


def game_status_from_object(value: Any) -> GameStatus | None:
    """Decode a `{"id": 10, "name": "created"}` status object.

    Either key may be missing or null. When both are given they must name the same status.
    A missing/null object decodes to None. A bare status string is rejected; only `GameStatus`
    members (models built in Python) pass through unchanged.
    """

    if value is None or isinstance(value, GameStatus):
        return value
    if not isinstance(value, dict):
        raise GameStatusError(f"expected a game status object, got {type(value).__name__}")

    status_id = value.get("id")
    name = value.get("name")

    from_id = game_status_from_id(status_id) if status_id is not None else None
    from_name = game_status_from_name(name) if name is not None else None

    if from_id is not None and from_name is not None and from_id != from_name:
        raise StatusIdNameMismatchError(status_id, name)

    return from_id if from_id is not None else from_name


StatusObject = Annotated[GameStatus | None, BeforeValidator(game_status_from_object)]


class Variant(StrEnum):
    standard = "standard"
    chess960 = "chess960"
    crazyhouse = "crazyhouse"
    antichess = "antichess"
    atomic = "atomic"
    horde = "horde"
    king_of_the_hill = "kingOfTheHill"
    racing_kings = "racingKings"
    three_check = "threeCheck"
    from_position = "fromPosition"


def variant_from_object(value: Any) -> Variant | None:
    """Decode a `{"key": "chess960", ...}` variant object.

    The server sends an empty object when no variant was chosen, so an object without a `key`
    decodes to None. Unknown keys are still rejected.
    """

    if value is None or isinstance(value, str):
        return value
    if not isinstance(value, dict):
        raise ValueError(f"expected a variant object, got {type(value).__name__}")

    key = value.get("key")
    if key is None:
        return None
    try:
        return Variant(key)
    except ValueError:
        raise ValueError(f"unknown variant key `{key}`") from None


VariantObject = Annotated[Variant | None, BeforeValidator(variant_from_object)]


class Speed(StrEnum):
    ultra_bullet = "ultraBullet"
    bullet = "bullet"
    blitz = "blitz"
    rapid = "rapid"
    classical = "classical"
    correspondence = "correspondence"


class Clock(WireModel):
    limit: Seconds | None = None
    increment: Seconds | None = None


class GamePerf(WireModel):
    # Translated perf name (e.g. "Classical" or "Blitz").
    name: str | None = None


class GameEventPlayer(WireModel):
    ai_level: int | None = None
    id: UserId | None = None
    name: str | None = None
    title: Title | None = None
    rating: int | None = None
    provisional: bool | None = None


class GameInfo(WireModel):
    """Immutable part of a game, as sent in the first record of a game stream."""

    id: GameId
    variant: VariantObject = None
    clock: Clock | None = None
    speed: Speed
    perf: GamePerf = Field(default_factory=GamePerf)
    rated: bool
    created_at: Timestamp
    white: GameEventPlayer
    black: GameEventPlayer
    initial_fen: Fen
    tournament_id: TournamentId | None = None
