from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from lichess_bot.errors import ApiError, DecodeError, NetworkError
from lichess_bot.infra.http_client import create_http_client
from lichess_bot.models.base import GameId, Seconds, UserProfile
from lichess_bot.models.challenge import ChallengeList, DeclineReason
from lichess_bot.models.chat import CHAT_HISTORY_ADAPTER, ChatLine, ChatRoom
from lichess_bot.models.events import BOT_EVENT_ADAPTER, GAME_EVENT_ADAPTER, BotEvent, GameEvent
from lichess_bot.models.requests import DeclineRequest, SendChatMessageRequest
from lichess_bot.models.user import UserPreferences
from lichess_bot.ndjson import MalformedRecord, iter_ndjson

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://lichess.org/api"

M = TypeVar("M", bound=BaseModel)


def join_url(base_url: str, path: str) -> str:
    """Join base URL and path with exactly one slash between them."""

    if base_url.endswith("/"):
        base_url = base_url[:-1]
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path


async def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        await response.aread()
        body = response.text
    except httpx.HTTPError:
        # The status is what matters; the body is best-effort detail.
        body = ""
    raise ApiError(response.status_code, body)


async def _read_lines(response: httpx.Response) -> AsyncIterator[str]:
    # Mid-stream read failures are classified like request failures.
    try:
        async for line in response.aiter_lines():
            yield line
    except httpx.HTTPError as e:
        raise NetworkError(f"networking error: {e}") from e


class BotClient:
    """Stateless handle on the lichess bot API.

    One method per endpoint; every call performs exactly one request and never retries.
    Safe to share between any number of concurrently running handlers.
    """

    def __init__(self, *, http: httpx.AsyncClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self._http = http
        self.base_url = base_url

    async def __aenter__(self) -> "BotClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---- request primitives ----

    async def _send_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: str | None = None,
        form: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = join_url(self.base_url, path)
        kwargs: dict[str, Any] = {}
        if params is not None:
            kwargs["params"] = params
        if json_body is not None:
            kwargs["content"] = json_body
            kwargs["headers"] = {"Content-Type": "application/json"}
        if form is not None:
            kwargs["data"] = form

        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError(f"networking error: {e}") from e

        await _raise_for_status(response)
        return response

    @staticmethod
    def _decode(model: type[M], response: httpx.Response) -> M:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"error deserializing response: {e}") from e

    @asynccontextmanager
    async def _open_stream(self, path: str) -> AsyncIterator[httpx.Response]:
        url = join_url(self.base_url, path)
        logger.info("Opening stream %s", url)
        try:
            async with self._http.stream("GET", url) as response:
                await _raise_for_status(response)
                yield response
        except httpx.HTTPError as e:
            raise NetworkError(f"networking error: {e}") from e
        finally:
            logger.info("Closed stream %s", url)

    # ---- challenges ----

    async def accept_challenge(self, challenge_id: GameId) -> None:
        await self._send_request("POST", f"/challenge/{challenge_id}/accept")

    async def decline_challenge(self, challenge_id: GameId, reason: DeclineReason | None = None) -> None:
        body = DeclineRequest(reason=reason).to_json()
        await self._send_request("POST", f"/challenge/{challenge_id}/decline", json_body=body)

    async def get_pending_challenges(self) -> ChallengeList:
        response = await self._send_request("GET", "/challenge")
        return self._decode(ChallengeList, response)

    # ---- playing ----

    async def make_move(self, game_id: GameId, move: str, *, offering_draw: bool = False) -> None:
        params = {"offeringDraw": "true" if offering_draw else "false"}
        await self._send_request("POST", f"/bot/game/{game_id}/move/{move}", params=params)

    async def abort_game(self, game_id: GameId) -> None:
        await self._send_request("POST", f"/bot/game/{game_id}/abort")

    async def resign_game(self, game_id: GameId) -> None:
        await self._send_request("POST", f"/bot/game/{game_id}/resign")

    async def handle_draw(self, game_id: GameId, *, accept: bool) -> None:
        """Offer or accept a draw (`accept=True`), or decline an offer (`accept=False`)."""

        answer = "yes" if accept else "no"
        await self._send_request("POST", f"/bot/game/{game_id}/draw/{answer}")

    async def offer_draw(self, game_id: GameId) -> None:
        await self.handle_draw(game_id, accept=True)

    async def accept_draw(self, game_id: GameId) -> None:
        await self.handle_draw(game_id, accept=True)

    async def decline_draw(self, game_id: GameId) -> None:
        await self.handle_draw(game_id, accept=False)

    async def add_time(self, game_id: GameId, seconds: Seconds) -> None:
        await self._send_request("POST", f"/round/{game_id}/add-time/{seconds}")

    # ---- chat ----

    async def get_chat(self, game_id: GameId) -> list[ChatLine]:
        response = await self._send_request("GET", f"/bot/game/{game_id}/chat")
        try:
            return CHAT_HISTORY_ADAPTER.validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"error deserializing response: {e}") from e

    async def send_chat_message(self, game_id: GameId, room: ChatRoom, text: str) -> None:
        form = SendChatMessageRequest(room=room, text=text).to_form()
        await self._send_request("POST", f"/bot/game/{game_id}/chat", form=form)

    # ---- accounts ----

    async def get_user_profile(self, username: str) -> UserProfile:
        response = await self._send_request("GET", f"/user/{username}")
        return self._decode(UserProfile, response)

    async def get_my_profile(self) -> UserProfile:
        response = await self._send_request("GET", "/account")
        return self._decode(UserProfile, response)

    async def get_my_preferences(self) -> UserPreferences:
        response = await self._send_request("GET", "/account/preferences")
        return self._decode(UserPreferences, response)

    # ---- streams ----

    @asynccontextmanager
    async def stream_bot_events(self) -> AsyncIterator[AsyncIterator[BotEvent | MalformedRecord]]:
        """Open the bot's event stream. Records are yielded lazily until the server closes it."""

        async with self._open_stream("/stream/event") as response:
            yield iter_ndjson(_read_lines(response), BOT_EVENT_ADAPTER)

    @asynccontextmanager
    async def stream_game_events(self, game_id: GameId) -> AsyncIterator[AsyncIterator[GameEvent | MalformedRecord]]:
        """Open the event stream of one game. The first record is always gameFull."""

        async with self._open_stream(f"/bot/game/stream/{game_id}") as response:
            yield iter_ndjson(_read_lines(response), GAME_EVENT_ADAPTER)


def build_bot_client(
    *,
    token: str | None,
    base_url: str = DEFAULT_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: httpx.Timeout | float | None = None,
) -> BotClient:
    """Create a `BotClient` authenticated with a lichess API token.

    Raises `NoTokenError` without a token, `InvalidTokenError` for a token that cannot be sent
    as a header, and `ClientInitError` if httpx cannot be set up.
    """

    http = create_http_client(token=token, transport=transport, timeout=timeout)
    return BotClient(http=http, base_url=base_url)
