r"""Contain the JSON request orchestration.

``fetch`` issues one HTTP(S) request, enforces a timeout on the response
headers, validates the status code, follows at most one redirect and
decodes a JSON response body. The outcome is reported through a single
callback invocation and one structured log entry per terminal event.
"""

from __future__ import annotations

__all__ = ["fetch"]

import asyncio
import time
from typing import TYPE_CHECKING, Any

import httpx

from jsonrequest.core.config import MAX_HOPS
from jsonrequest.core.options import NormalizedRequest, RequestOptions, normalize_request
from jsonrequest.core.outcome import OutcomeKind, ResponseOutcome
from jsonrequest.core.redirect import is_redirect, redirect_options
from jsonrequest.core.status import check_status
from jsonrequest.exceptions import (
    FetchError,
    FetchTimeoutError,
    JsonParseError,
    RequestFailedError,
)
from jsonrequest.utils.body import (
    is_json_content_type,
    is_textual_content_type,
    parse_json_body,
)
from jsonrequest.utils.callbacks import CallbackSlot
from jsonrequest.utils.streams import FinishNotifyingStream

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Mapping


def fetch(
    options: Mapping[str, Any],
    data: Any = None,
    callback: Callable[..., Any] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> Coroutine[Any, Any, None]:
    """Issue a JSON request and report its outcome to ``callback``.

    The options are validated when ``fetch`` is called, so a
    configuration mistake raises before anything is awaited. The
    returned coroutine performs the request; every runtime failure is
    delivered to the callback, never raised.

    Args:
        options: The request options. Connection fields are ``method``,
            ``host`` (or ``hostname``), ``port``, ``path`` and
            ``headers``. Orchestration fields are ``protocol``
            (``"http"`` or ``"https"``, default ``"https"``), ``timeout``
            (milliseconds, ``0`` disables it), ``expect`` (a status code
            or a list of status codes, default any 2xx), ``stream`` and
            ``log`` (a ``logging.Logger`` or ``FetchLogger``). Any other
            key is forwarded to ``httpx.AsyncClient.build_request``. The
            mapping is never modified.
        data: Optional payload. ``None`` sends no body, bytes are sent as
            they are, file-like objects and iterators are streamed, and
            any other value is encoded as JSON. When ``data`` is callable
            and ``callback`` is omitted, ``data`` is the callback.
        callback: Called exactly once per logical request. In standard
            mode it receives ``(error, data, response)``; in stream mode
            ``(None, response)`` on success, ``(error, None)`` when no
            response arrived and ``(error, None, response)`` when the
            status was rejected.
        client: Optional client to send the request with. When omitted
            each hop opens and closes its own client.

    Returns:
        The coroutine running the request.

    Raises:
        UnsupportedProtocolError: If the protocol is not supported.
        ValueError: If the timeout or the expectation is invalid.

    Example:
        ```pycon
        >>> import asyncio
        >>> from jsonrequest import fetch
        >>> def on_done(error, data, response):
        ...     print(error, data)
        ...
        >>> asyncio.run(
        ...     fetch({"hostname": "api.example.com", "path": "/data", "timeout": 5000}, on_done)
        ... )  # doctest: +SKIP

        ```
    """
    if callback is None and callable(data):
        callback, data = data, None
    validated = RequestOptions.from_mapping(options)
    return _fetch(dict(options), validated, data, CallbackSlot(callback), client)


async def _fetch(
    options: dict[str, Any],
    validated: RequestOptions,
    data: Any,
    slot: CallbackSlot,
    client: httpx.AsyncClient | None,
) -> None:
    # Each iteration is an independent hop; only copied options cross hops
    for hop in range(1, MAX_HOPS + 1):
        request = normalize_request(validated, data)
        outcome = await _fetch_hop(request, slot, client, allow_redirect=hop < MAX_HOPS)
        if outcome is None:
            return
        _report(request, outcome, slot)
        if outcome.kind is not OutcomeKind.REDIRECT:
            return
        options = redirect_options(options, validated, outcome.response.headers["location"])
        data = None
        try:
            validated = RequestOptions.from_mapping(options)
        except ValueError as exc:
            error = RequestFailedError(str(exc), request=request.summary(), cause=exc)
            request.logger.error(str(error), request=request.summary())
            _fire_failure(slot, request, error)
            return


async def _fetch_hop(
    request: NormalizedRequest,
    slot: CallbackSlot,
    client: httpx.AsyncClient | None,
    *,
    allow_redirect: bool,
) -> ResponseOutcome | None:
    r"""Run one hop up to the classification of its response.

    Returns ``None`` when the hop ended without a response (timeout or
    transport failure), in which case the callback already fired. Once
    the hop ceiling is reached a 302 is read as a regular response.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=None)
    keep_client = False
    try:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                client.send(request.build(client), stream=True, follow_redirects=False),
                timeout=request.timeout_seconds,
            )
        except asyncio.TimeoutError:
            # wait_for cancelled the pending send, which closed its connection
            error: FetchError = FetchTimeoutError(
                request.options.timeout or 0, request=request.summary()
            )
            request.logger.warn(
                str(error), ms=_elapsed_ms(start), request=_request_details(request)
            )
            _fire_failure(slot, request, error)
            return None
        except httpx.HTTPError as exc:
            error = RequestFailedError(str(exc), request=request.summary(), cause=exc)
            request.logger.error(
                str(error), ms=_elapsed_ms(start), request=_request_details(request)
            )
            _fire_failure(slot, request, error)
            return None

        head = time.monotonic()
        outcome = ResponseOutcome(
            kind=OutcomeKind.PARSED,
            response=response,
            ms_head=_ms(start, head),
            summary={"status_code": response.status_code, "headers": dict(response.headers)},
        )
        rejection = check_status(
            response.status_code, request.options.expect, request=request.summary()
        )
        if rejection is not None:
            outcome.kind, outcome.error = OutcomeKind.REJECTED, rejection
            return await _drain_rejected(response, outcome, head)

        if allow_redirect and is_redirect(response):
            await response.aclose()
            outcome.kind = OutcomeKind.REDIRECT
            return outcome

        if request.options.stream:
            outcome.kind = OutcomeKind.STREAMED
            if response.is_stream_consumed or response.is_closed:
                # The transport already buffered the body, nothing is left to stream
                outcome.ms_body = _elapsed_ms(head)
                return outcome
            logger = request.logger
            response.stream = FinishNotifyingStream(
                response.stream,
                on_finish=lambda: logger.finish(ms_body=_elapsed_ms(head)),
                on_close=client.aclose if owns_client else None,
            )
            keep_client = owns_client
            return outcome

        return await _collect_body(request, response, outcome, head)
    finally:
        if owns_client and not keep_client:
            await client.aclose()


async def _read_text(response: httpx.Response) -> str:
    return (await response.aread()).decode("utf-8", errors="replace")


async def _drain_rejected(
    response: httpx.Response, outcome: ResponseOutcome, head: float
) -> ResponseOutcome:
    """Consume the body of a rejected response, keeping it for the log
    when it is textual."""
    try:
        body = await _read_text(response)
    except httpx.HTTPError as exc:
        outcome.ms_body = _elapsed_ms(head)
        outcome.summary["body_error"] = str(exc)
        return outcome
    outcome.ms_body = _elapsed_ms(head)
    if is_textual_content_type(response.headers.get("content-type")):
        outcome.summary["body"] = body
    return outcome


async def _collect_body(
    request: NormalizedRequest,
    response: httpx.Response,
    outcome: ResponseOutcome,
    head: float,
) -> ResponseOutcome:
    try:
        body = await _read_text(response)
    except httpx.HTTPError as exc:
        await response.aclose()
        outcome.kind = OutcomeKind.FAILED
        outcome.error = RequestFailedError(str(exc), request=request.summary(), cause=exc)
        outcome.ms_body = _elapsed_ms(head)
        return outcome
    outcome.ms_body = _elapsed_ms(head)
    outcome.kind = OutcomeKind.PARSED
    if body and is_json_content_type(response.headers.get("content-type")):
        try:
            outcome.data = parse_json_body(body, request=request.summary())
        except JsonParseError as exc:
            outcome.kind, outcome.error, outcome.data = OutcomeKind.PARSE_FAILED, exc, body
            outcome.summary["body"] = body
            return outcome
        outcome.summary["json"] = outcome.data
    return outcome


def _report(request: NormalizedRequest, outcome: ResponseOutcome, slot: CallbackSlot) -> None:
    """Write the log entry of an outcome and deliver it to the callback."""
    log = request.logger
    fields = {
        "request": request.summary(),
        "response": outcome.summary,
        "ms_head": outcome.ms_head,
        "ms_body": outcome.ms_body,
    }
    kind = outcome.kind
    if kind is OutcomeKind.REDIRECT:
        log.fetch(**fields)
    elif kind is OutcomeKind.STREAMED:
        log.fetch(request=fields["request"], response=outcome.summary, ms_head=outcome.ms_head)
        if outcome.ms_body is not None:
            log.finish(ms_body=outcome.ms_body)
        slot.fire(None, outcome.response)
    elif kind is OutcomeKind.REJECTED:
        log.warn(str(outcome.error), **fields)
        slot.fire(outcome.error, None, outcome.response)
    elif kind is OutcomeKind.PARSE_FAILED:
        log.error(str(outcome.error), **fields)
        slot.fire(outcome.error, outcome.data, outcome.response)
    elif kind is OutcomeKind.FAILED:
        log.error(str(outcome.error), **fields)
        slot.fire(outcome.error, None, outcome.response)
    else:
        log.fetch(**fields)
        slot.fire(None, outcome.data, outcome.response)


def _fire_failure(slot: CallbackSlot, request: NormalizedRequest, error: FetchError) -> None:
    """Deliver a failure that happened before any response arrived."""
    if request.options.stream:
        slot.fire(error, None)
    else:
        slot.fire(error, None, None)


def _request_details(request: NormalizedRequest) -> dict[str, Any]:
    details = request.summary()
    details["headers"] = request.headers
    return details


def _ms(start: float, end: float) -> int:
    return round((end - start) * 1000)


def _elapsed_ms(start: float) -> int:
    return _ms(start, time.monotonic())
