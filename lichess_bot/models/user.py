from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, model_validator

from lichess_bot.models.base import UserId, WireModel


class Title(StrEnum):
    gm = "GM"
    wgm = "WGM"
    im = "IM"
    wim = "WIM"
    fm = "FM"
    wfm = "WFM"
    nm = "NM"
    wnm = "WNM"
    cm = "CM"
    wcm = "WCM"
    lm = "LM"
    bot = "BOT"


class User(WireModel):
    rating: int | None = None
    provisional: bool | None = None
    online: bool | None = None
    id: UserId
    name: str
    title: Title | None = None
    patron: bool | None = None


class UserPreferences(WireModel):
    """Account preferences.

    The wire shape nests everything except `language` under `prefs`; this model flattens it.
    Integer fields are lichess preference codes and are kept as sent.
    """

    dark: bool = False
    transparent: bool = Field(default=False, alias="transp")
    background_image: str | None = Field(default=None, alias="bgImg")
    is_3d: bool = Field(default=False, alias="is3d")
    theme: str
    piece_set: str
    theme_3d: str = Field(alias="theme3d")
    piece_set_3d: str = Field(alias="pieceSet3d")
    sound_set: str
    blindfold: int
    auto_queen: int
    auto_threefold: int
    take_back: int = Field(alias="takeback")
    more_time: int = Field(alias="moretime")
    clock_tenths: int
    clock_bar: bool = False
    clock_sound: bool = False
    premove: bool = False
    animation: int
    captured: bool = False
    follow: bool = False
    highlight: bool = False
    destination: bool = False
    coords: int
    replay: int
    challenge: int
    message: int
    coord_color: int
    submit_move: int
    confirm_resign: int
    insight_share: int
    keyboard_move: int
    zen: int
    move_event: int
    rook_castle: int
    language: str

    @model_validator(mode="before")
    @classmethod
    def _flatten_prefs(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("prefs"), dict):
            flat = dict(data["prefs"])
            flat["language"] = data.get("language")
            return flat
        return data
