from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from lichess_bot.models.base import Fen, GameId, TimeControl, WireModel
from lichess_bot.models.game import Speed, VariantObject
from lichess_bot.models.user import User


class ChallengeStatus(StrEnum):
    created = "created"
    offline = "offline"
    canceled = "canceled"
    declined = "declined"
    accepted = "accepted"


class ChallengeColor(StrEnum):
    white = "white"
    black = "black"
    random = "random"


class ChallengeDirection(StrEnum):
    incoming = "in"
    outgoing = "out"


class DeclineReason(StrEnum):
    """Reasons a bot can give for declining a challenge.

    Shown to the challenger so they can send a challenge the bot will accept.
    """

    # The bot does not accept challenges.
    generic = "generic"
    # Not right now, maybe later.
    later = "later"
    too_fast = "tooFast"
    too_slow = "tooSlow"
    # The time control is not accepted at all.
    time_control = "timeControl"
    # The bot wants a rated challenge.
    rated = "rated"
    # The bot wants a casual challenge.
    casual = "casual"
    # The bot only plays standard chess.
    standard = "standard"
    variant = "variant"
    no_bot = "noBot"
    only_bot = "onlyBot"


class ChallengePerf(WireModel):
    icon: str | None = None
    name: str | None = None


class Challenge(WireModel):
    id: GameId
    url: str
    status: ChallengeStatus
    challenger: User
    dest_user: User | None = None
    variant: VariantObject = None
    rated: bool
    speed: Speed
    time_control: TimeControl
    color: ChallengeColor
    perf: ChallengePerf
    direction: ChallengeDirection | None = None
    initial_fen: Fen | None = None
    # Human readable text and machine key are sent side by side and may disagree.
    decline_reason: str | None = None
    decline_reason_key: DeclineReason | None = None


class ChallengeDeclined(WireModel):
    id: GameId


class ChallengeList(WireModel):
    incoming: list[Challenge] = Field(default_factory=list, alias="in")
    outgoing: list[Challenge] = Field(default_factory=list, alias="out")
