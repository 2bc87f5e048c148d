from __future__ import annotations

import pytest

from lichess_bot.client import DEFAULT_BASE_URL, build_bot_client
from lichess_bot.errors import InvalidTokenError, NoTokenError


@pytest.mark.parametrize("token", [None, ""])
def test_building_fails_without_token(token: str | None) -> None:
    with pytest.raises(NoTokenError):
        build_bot_client(token=token)


@pytest.mark.parametrize("token", ["\0", "abc\n123", "töken"])
def test_building_fails_with_invalid_token(token: str) -> None:
    with pytest.raises(InvalidTokenError):
        build_bot_client(token=token)


@pytest.mark.asyncio
async def test_building_succeeds_with_default_base_url() -> None:
    async with build_bot_client(token="abc123") as client:
        assert client.base_url == DEFAULT_BASE_URL


@pytest.mark.asyncio
async def test_building_succeeds_with_overridden_base_url() -> None:
    async with build_bot_client(token="abc123", base_url="https://base.url/path") as client:
        assert client.base_url == "https://base.url/path"
