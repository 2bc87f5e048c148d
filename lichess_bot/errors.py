from __future__ import annotations


class LichessBotError(Exception):
    pass


# ---- single API calls ----


class RequestError(LichessBotError):
    """A single API call failed. Always raised to the immediate caller."""


class NetworkError(RequestError):
    """The request could not be sent or the response could not be read."""


class DecodeError(RequestError):
    """The response body did not match the expected shape."""


class ApiError(RequestError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"lichess returned HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


# ---- client construction ----


class BuilderError(LichessBotError):
    pass


class NoTokenError(BuilderError):
    def __init__(self) -> None:
        super().__init__("no token specified")


class InvalidTokenError(BuilderError):
    pass


class ClientInitError(BuilderError):
    pass


# ---- streams ----


class StreamError(LichessBotError):
    """A stream could not be consumed any further."""


class ProtocolViolation(StreamError):
    """The server sent records in an order the game stream protocol does not allow."""

    def __init__(self, game_id: str, message: str) -> None:
        super().__init__(f"game {game_id}: {message}")
        self.game_id = game_id


class StreamDecodeError(StreamError):
    def __init__(self, line: str, error: Exception) -> None:
        super().__init__(f"could not decode stream record {line!r}: {error}")
        self.line = line
        self.error = error
