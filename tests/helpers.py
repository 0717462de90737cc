r"""Shared test helpers for the request orchestration tests.

This module contains the transport doubles used across the unit tests:
a handler recording every request it receives and answering with queued
responses, and a factory for clients wired to such a handler.
"""

from __future__ import annotations

__all__ = ["ChunkStream", "RecordingHandler", "json_response", "make_client"]

import json
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable


class ChunkStream(httpx.AsyncByteStream):
    """Response body produced chunk by chunk, only when it is read."""

    def __init__(self, *chunks: bytes) -> None:
        self._chunks = chunks

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            yield chunk


def json_response(status_code: int = 200, payload: Any = None, **kwargs: Any) -> httpx.Response:
    """Create a response with a JSON body."""
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"content-type": "application/json"},
        **kwargs,
    )


class RecordingHandler:
    """Answer requests with queued responses and keep the requests.

    Args:
        *responses: The responses, or callables building a response
            from the request, returned in order. The last one is reused
            once the queue is exhausted.
    """

    def __init__(self, *responses: httpx.Response | Callable[[httpx.Request], Any]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(await request.aread())
        index = min(len(self.requests), len(self._responses)) - 1
        response = self._responses[index]
        if callable(response):
            response = response(request)
            if not isinstance(response, httpx.Response):
                response = await response
        return response


def make_client(handler: RecordingHandler) -> httpx.AsyncClient:
    """Create a client sending every request to ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
