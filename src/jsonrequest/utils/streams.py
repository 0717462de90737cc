r"""Response stream wrapper used in stream mode.

In stream mode the caller consumes the response body. The wrapper below
keeps track of that consumption so the request logger can record when
the body ended, and closes the client owned by the request once the
caller closes the response.
"""

from __future__ import annotations

__all__ = ["FinishNotifyingStream"]

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable


class FinishNotifyingStream(httpx.AsyncByteStream):
    """Wrap a response byte stream and report its end.

    Args:
        stream: The response stream to wrap.
        on_finish: Called once, when the stream is exhausted or closed.
        on_close: Optional coroutine function awaited after the wrapped
            stream is closed.
    """

    def __init__(
        self,
        stream: httpx.AsyncByteStream,
        on_finish: Callable[[], None],
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._stream = stream
        self._on_finish = on_finish
        self._on_close = on_close
        self._finished = False
        self._closed = False

    def _finish(self) -> None:
        if not self._finished:
            self._finished = True
            self._on_finish()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self._stream:
            yield chunk
        self._finish()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._stream.aclose()
        finally:
            self._finish()
            if self._on_close is not None:
                await self._on_close()
