r"""Tagged result of processing one response."""

from __future__ import annotations

__all__ = ["OutcomeKind", "ResponseOutcome"]

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

    from jsonrequest.exceptions import FetchError


class OutcomeKind(str, Enum):
    """What happened to a response once its headers arrived."""

    REJECTED = "rejected"
    REDIRECT = "redirect"
    STREAMED = "streamed"
    PARSED = "parsed"
    PARSE_FAILED = "parse_failed"
    FAILED = "failed"


@dataclass
class ResponseOutcome:
    """Result of processing one response.

    Attributes:
        kind: The outcome tag.
        response: The response.
        ms_head: Milliseconds from the request start to the response
            headers.
        ms_body: Milliseconds from the response headers to the end of the
            body, when the body was read.
        error: The failure, for ``REJECTED``, ``PARSE_FAILED`` and
            ``FAILED``.
        data: The parsed JSON value for ``PARSED``, the raw text for
            ``PARSE_FAILED``.
        summary: The response fields written to the log.
    """

    kind: OutcomeKind
    response: httpx.Response
    ms_head: int
    ms_body: int | None = None
    error: FetchError | None = None
    data: Any = None
    summary: dict[str, Any] = field(default_factory=dict)
