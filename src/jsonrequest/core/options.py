r"""Option normalization for JSON requests.

This module turns the caller option mapping and payload into the
transport-ready description of one hop: validated options, a payload
variant decided once at the call boundary, the request headers and the
request logger.
"""

from __future__ import annotations

__all__ = [
    "JsonBody",
    "NoBody",
    "NormalizedRequest",
    "Payload",
    "RawBody",
    "RequestOptions",
    "StreamBody",
    "classify_payload",
    "normalize_request",
]

import inspect
import json
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from jsonrequest.core.config import (
    DEFAULT_HOST,
    DEFAULT_METHOD,
    DEFAULT_PATH,
    DEFAULT_PROTOCOL,
    FETCH_LOGGER_NAME,
    JSON_CONTENT_TYPE,
    ORCHESTRATION_KEYS,
    STREAM_CHUNK_SIZE,
)
from jsonrequest.core.validation import (
    normalize_protocol,
    validate_expect,
    validate_timeout,
)
from jsonrequest.utils.logger import FetchLogger, get_default_logger

if TYPE_CHECKING:
    import logging
    from collections.abc import Mapping

    import httpx

_CONNECTION_KEYS = frozenset({"method", "host", "hostname", "port", "path", "headers"})


@dataclass
class RequestOptions:
    """Validated view of the option mapping passed to ``fetch``.

    The caller mapping is never modified: ``from_mapping`` copies every
    value it keeps, including the headers mapping.

    Args:
        protocol: The URL scheme, ``"http"`` or ``"https"``. A trailing
            colon is accepted.
        method: The HTTP method.
        host: The host name to connect to.
        port: Optional port number.
        path: The request path, including any query string.
        headers: The request headers.
        timeout: Time in milliseconds to wait for the response headers.
            ``0`` or ``None`` disables the timeout.
        expect: A status code or a sequence of status codes. ``None``
            accepts any 2xx status.
        stream: Whether to hand back the raw response without reading
            the body.
        log: Optional caller logger from which the request logger is
            derived.
        extra: Remaining keys, forwarded to ``httpx.AsyncClient.build_request``
            (e.g. ``params`` or ``cookies``).

    Raises:
        UnsupportedProtocolError: If the protocol is not supported.
        ValueError: If the timeout is negative or the expectation is not
            made of integers.

    Example:
        ```pycon
        >>> from jsonrequest.core.options import RequestOptions
        >>> options = RequestOptions.from_mapping(
        ...     {"hostname": "example.com", "expect": [200, 302], "timeout": 500}
        ... )
        >>> options.host, options.protocol, options.expect
        ('example.com', 'https', (200, 302))
        >>> options.url
        'https://example.com/'

        ```
    """

    protocol: str = DEFAULT_PROTOCOL
    method: str = DEFAULT_METHOD
    host: str = DEFAULT_HOST
    port: int | None = None
    path: str = DEFAULT_PATH
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    expect: int | tuple[int, ...] | None = None
    stream: bool = False
    log: logging.Logger | FetchLogger | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.protocol = normalize_protocol(self.protocol)
        validate_timeout(self.timeout)
        validate_expect(self.expect)
        if isinstance(self.expect, list):
            self.expect = tuple(self.expect)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> RequestOptions:
        """Build the validated options from a caller mapping.

        Args:
            options: The caller options. ``hostname`` is accepted as an
                alias of ``host``.

        Returns:
            The validated options.

        Raises:
            UnsupportedProtocolError: If the protocol is not supported.
        """
        expect = options.get("expect")
        return cls(
            protocol=options.get("protocol") or DEFAULT_PROTOCOL,
            method=str(options.get("method") or DEFAULT_METHOD).upper(),
            host=options.get("host") or options.get("hostname") or DEFAULT_HOST,
            port=options.get("port") or None,
            path=options.get("path") or DEFAULT_PATH,
            headers=dict(options.get("headers") or {}),
            timeout=options.get("timeout") or None,
            expect=tuple(expect) if isinstance(expect, (list, tuple)) else expect,
            stream=bool(options.get("stream")),
            log=options.get("log"),
            extra={
                key: value
                for key, value in options.items()
                if key not in ORCHESTRATION_KEYS and key not in _CONNECTION_KEYS
            },
        )

    @property
    def url(self) -> str:
        """The effective URL of the request."""
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"{self.protocol}://{netloc}{path}"


@dataclass(frozen=True)
class NoBody:
    """No request body; the request is ended immediately."""


@dataclass(frozen=True)
class RawBody:
    """Pre-encoded bytes sent as they are."""

    content: bytes


@dataclass(frozen=True)
class StreamBody:
    """A byte source piped into the request until it is exhausted.

    The source can be a file-like object (sync or async ``read``), a
    sync iterator or an async iterator of bytes.
    """

    source: Any

    async def chunks(self) -> AsyncIterator[bytes]:
        source = self.source
        if hasattr(source, "read"):
            while True:
                chunk = source.read(STREAM_CHUNK_SIZE)
                if inspect.isawaitable(chunk):
                    chunk = await chunk
                if not chunk:
                    return
                yield _to_bytes(chunk)
        elif isinstance(source, AsyncIterable):
            async for chunk in source:
                yield _to_bytes(chunk)
        else:
            for chunk in source:
                yield _to_bytes(chunk)


@dataclass(frozen=True)
class JsonBody:
    """A value encoded as JSON text."""

    value: Any
    text: str

    @property
    def content_length(self) -> int:
        return len(self.text.encode("utf-8"))


Payload = Union[NoBody, RawBody, StreamBody, JsonBody]


def _to_bytes(chunk: bytes | str) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


def classify_payload(data: Any) -> Payload:
    """Decide how a payload is sent.

    Args:
        data: The caller payload.

    Returns:
        ``NoBody`` for ``None``, ``RawBody`` for bytes, ``StreamBody`` for
        file-like objects and iterators, ``JsonBody`` for anything else.

    Example:
        ```pycon
        >>> from jsonrequest.core.options import classify_payload
        >>> classify_payload(None)
        NoBody()
        >>> classify_payload({"some": "payload"})
        JsonBody(value={'some': 'payload'}, text='{"some":"payload"}')

        ```
    """
    if data is None:
        return NoBody()
    if isinstance(data, (bytes, bytearray)):
        return RawBody(bytes(data))
    if hasattr(data, "read") or isinstance(data, (Iterator, AsyncIterator)):
        return StreamBody(data)
    return JsonBody(value=data, text=json.dumps(data, separators=(",", ":"), ensure_ascii=False))


def _find_header(headers: Mapping[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key in headers:
        if key.lower() == lowered:
            return key
    return None


@dataclass
class NormalizedRequest:
    """Transport-ready description of one hop.

    Attributes:
        options: The validated options.
        payload: The payload variant.
        headers: The request headers, a copy of the caller headers with
            the body headers added.
        logger: The logger scoped to this request.
    """

    options: RequestOptions
    payload: Payload
    headers: dict[str, str]
    logger: FetchLogger

    @property
    def timeout_seconds(self) -> float | None:
        if not self.options.timeout:
            return None
        return self.options.timeout / 1000

    def summary(self) -> dict[str, Any]:
        """Return the request fields written to the log."""
        request: dict[str, Any] = {
            "protocol": self.options.protocol,
            "method": self.options.method,
            "host": self.options.host,
            "path": self.options.path,
        }
        if self.options.port is not None:
            request["port"] = self.options.port
        if isinstance(self.payload, JsonBody):
            request["body"] = self.payload.text
        return request

    def build(self, client: httpx.AsyncClient) -> httpx.Request:
        """Build the request on the given client.

        The client timeouts are disabled on the request, the only timeout
        applied is the one of the options, on the response headers.
        """
        payload = self.payload
        if isinstance(payload, JsonBody):
            content: Any = payload.text.encode("utf-8")
        elif isinstance(payload, RawBody):
            content = payload.content
        elif isinstance(payload, StreamBody):
            content = payload.chunks()
        else:
            content = None
        return client.build_request(
            self.options.method,
            self.options.url,
            headers=self.headers,
            content=content,
            timeout=None,
            **self.options.extra,
        )


def normalize_request(
    options: RequestOptions, data: Any = None, *, logger: FetchLogger | None = None
) -> NormalizedRequest:
    """Normalize the options and payload of one hop.

    The headers of ``options`` are copied before the body headers are
    added. ``Content-Length`` is always computed for a JSON payload, and
    ``Content-Type`` is only set when the caller did not provide one.

    Args:
        options: The validated options.
        data: The caller payload.
        logger: Optional logger used when ``options.log`` is not set.
            Defaults to the package logger.

    Returns:
        The normalized request.

    Example:
        ```pycon
        >>> from jsonrequest.core.options import RequestOptions, normalize_request
        >>> request = normalize_request(RequestOptions(method="POST"), {"some": "payload"})
        >>> request.headers
        {'Content-Length': '18', 'Content-Type': 'application/json'}

        ```
    """
    payload = classify_payload(data)
    headers = dict(options.headers)
    if isinstance(payload, JsonBody):
        length_key = _find_header(headers, "Content-Length")
        if length_key is not None:
            del headers[length_key]
        headers["Content-Length"] = str(payload.content_length)
        if _find_header(headers, "Content-Type") is None:
            headers["Content-Type"] = JSON_CONTENT_TYPE
    if options.log is not None:
        parent = FetchLogger.from_logger(options.log)
    else:
        parent = logger or get_default_logger()
    return NormalizedRequest(
        options=options,
        payload=payload,
        headers=headers,
        logger=parent.child(FETCH_LOGGER_NAME),
    )
