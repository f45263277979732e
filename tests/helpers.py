from __future__ import annotations

import json
from typing import Callable

import httpx

HOST = "checkpoint.test"
IDENTITIES_ME_URL = f"http://{HOST}/api/checkpoint/v1/identities/me"


class TrackingStream(httpx.AsyncByteStream):
    """Async body that counts `aclose()` calls and can fail mid-read."""

    def __init__(self, chunks: tuple[bytes, ...] = (), error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.close_calls = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.close_calls += 1


class RecordingHandler:
    """MockTransport handler that replays canned responses and keeps the requests it saw."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def user_payload(identity_id: str = "u1", name: str = "Ann") -> bytes:
    return json.dumps({"identity": {"id": identity_id}, "profile": {"name": name}}).encode()
