from __future__ import annotations

from enum import StrEnum

from pydantic import TypeAdapter

from lichess_bot.models.base import WireModel


class ChatRoom(StrEnum):
    player = "player"
    spectator = "spectator"


class ChatLine(WireModel):
    username: str
    text: str


CHAT_HISTORY_ADAPTER: TypeAdapter[list[ChatLine]] = TypeAdapter(list[ChatLine])
