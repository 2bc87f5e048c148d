from __future__ import annotations

import httpx

from lichess_bot.errors import ClientInitError, InvalidTokenError, NoTokenError


def _authorization_value(token: str) -> str:
    value = f"Bearer {token}"
    # Same rule as an HTTP header value: visible ASCII, spaces and tabs only.
    if any(not (32 <= ord(ch) < 127 or ch == "\t") for ch in value):
        raise InvalidTokenError("token is invalid: contains characters not allowed in an HTTP header")
    return value


def create_http_client(
    *,
    token: str | None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: httpx.Timeout | float | None = None,
) -> httpx.AsyncClient:
    """Create the authenticated transport shared by every request of a `BotClient`.

    The token is attached as a default `Authorization: Bearer ...` header.
    Streams stay open indefinitely, so only connecting is timed out by default.
    """

    if not token:
        raise NoTokenError()

    headers = {"Authorization": _authorization_value(token)}
    if timeout is None:
        timeout = httpx.Timeout(None, connect=10.0)

    try:
        return httpx.AsyncClient(headers=headers, transport=transport, timeout=timeout)
    except (httpx.HTTPError, ValueError, TypeError) as e:
        raise ClientInitError(f"error initializing client: {e}") from e
