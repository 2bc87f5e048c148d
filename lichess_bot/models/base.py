from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GameId = str
UserId = str
TournamentId = str
Fen = str
Milliseconds = int
Seconds = int
Days = int
Timestamp = int


class WireModel(BaseModel):
    """Base for everything decoded from (or encoded to) the lichess wire format.

    Python field names are snake_case, wire names camelCase. Unknown wire fields are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Compat(WireModel):
    bot: bool | None = None
    board: bool | None = None


class ClockTimeControl(WireModel):
    type: Literal["clock"] = "clock"
    limit: Seconds | None = None
    increment: Seconds | None = None
    show: str | None = None


class CorrespondenceTimeControl(WireModel):
    type: Literal["correspondence"] = "correspondence"
    days_per_turn: Days | None = None


class UnlimitedTimeControl(WireModel):
    type: Literal["unlimited"] = "unlimited"


TimeControl = Annotated[
    Union[ClockTimeControl, CorrespondenceTimeControl, UnlimitedTimeControl],
    Field(discriminator="type"),
]


class UserProfile(WireModel):
    id: UserId
    username: str
