from __future__ import annotations

from lichess_bot.models.base import WireModel
from lichess_bot.models.challenge import DeclineReason
from lichess_bot.models.chat import ChatRoom


class DeclineRequest(WireModel):
    reason: DeclineReason | None = None

    def to_json(self) -> str:
        # The reason is omitted entirely when absent.
        return self.model_dump_json(by_alias=True, exclude_none=True)


class SendChatMessageRequest(WireModel):
    room: ChatRoom
    text: str

    def to_form(self) -> dict[str, str]:
        return {"room": self.room.value, "text": self.text}
