from __future__ import annotations

import json
from collections.abc import AsyncGenerator, AsyncIterator
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from lichess_bot.client import BotClient, build_bot_client

BASE_URL = "http://lichess.test/api"


@dataclass(frozen=True, slots=True)
class RecordedRequest:
    method: str
    path: str
    query: dict[str, str]
    body: bytes
    headers: dict[str, str]

    def json(self) -> Any:
        return json.loads(self.body)

    def form(self) -> dict[str, str]:
        return {k: v[0] for k, v in parse_qs(self.body.decode()).items()}


class FakeLichess:
    """In-process stand-in for the lichess API.

    Records every request and answers with scripted JSON bodies or NDJSON streams.
    Unscripted requests get an empty 200.
    """

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self._responses: dict[tuple[str, str], tuple[int, Any]] = {}
        self._streams: dict[str, list[str]] = {}
        self.app = FastAPI()
        self.app.add_api_route("/{path:path}", self._handle, methods=["GET", "POST"])

    def respond(self, method: str, path: str, *, status: int = 200, payload: Any = None) -> None:
        self._responses[(method, path)] = (status, payload)

    def stream(self, path: str, records: list[Any]) -> None:
        """Script an NDJSON stream. Strings are sent verbatim, anything else as JSON."""

        self._streams[path] = [r if isinstance(r, str) else json.dumps(r) for r in records]

    def calls(self, method: str, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == path]

    async def _handle(self, path: str, request: Request) -> Response:
        full_path = "/" + path
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=full_path,
                query=dict(request.query_params),
                body=await request.body(),
                headers=dict(request.headers),
            )
        )

        if request.method == "GET" and full_path in self._streams:
            lines = self._streams[full_path]

            async def _body() -> AsyncIterator[bytes]:
                for line in lines:
                    yield (line + "\n").encode()

            return StreamingResponse(_body(), media_type="application/x-ndjson")

        status, payload = self._responses.get((request.method, full_path), (200, None))
        if payload is None:
            return Response(status_code=status)
        if isinstance(payload, str):
            return Response(content=payload, status_code=status, media_type="text/plain")
        return JSONResponse(payload, status_code=status)


@pytest.fixture()
def fake_lichess() -> FakeLichess:
    return FakeLichess()


@pytest_asyncio.fixture()
async def client(fake_lichess: FakeLichess) -> AsyncGenerator[BotClient, None]:
    c = build_bot_client(
        token="mock_token",
        base_url=BASE_URL,
        transport=httpx.ASGITransport(app=fake_lichess.app),
    )
    yield c
    await c.aclose()
