from __future__ import annotations

import os
from dataclasses import dataclass

from lichess_bot.client import DEFAULT_BASE_URL, BotClient, build_bot_client


@dataclass(frozen=True, slots=True)
class BotSettings:
    token: str | None
    base_url: str = DEFAULT_BASE_URL


def settings_from_env() -> BotSettings:
    return BotSettings(
        token=os.environ.get("LICHESS_BOT_TOKEN"),
        # Point at a local lichess instance, e.g. http://localhost:9663/api
        base_url=os.environ.get("LICHESS_BASE_URL", DEFAULT_BASE_URL),
    )


def client_from_settings(settings: BotSettings) -> BotClient:
    return build_bot_client(token=settings.token, base_url=settings.base_url)
