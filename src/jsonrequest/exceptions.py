r"""Define the exceptions reported by JSON requests.

Runtime failures are never raised to the caller of ``fetch``: they are
handed to the callback as one of the ``FetchError`` subclasses below,
each carrying a ``code`` and its own structured payload. The only
exception raised synchronously is ``UnsupportedProtocolError``, which
reflects a programming mistake rather than a runtime fault.
"""

from __future__ import annotations

__all__ = [
    "ExpectError",
    "FetchError",
    "FetchTimeoutError",
    "JsonParseError",
    "RequestFailedError",
    "UnsupportedProtocolError",
]

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Sequence


class UnsupportedProtocolError(ValueError):
    """Raised when the options name a protocol other than http or https.

    Args:
        protocol: The rejected protocol.
    """

    def __init__(self, protocol: Any) -> None:
        super().__init__(f'Unsupported protocol "{protocol}"')
        self.protocol = protocol


class FetchError(Exception):
    """Base class of the failures delivered to the ``fetch`` callback.

    Args:
        message: Descriptive error message.
        request: Optional summary of the request that failed.
        cause: Optional underlying exception. It is also chained as
            ``__cause__``.

    Example:
        ```pycon
        >>> from jsonrequest.exceptions import FetchError, RequestFailedError
        >>> error = RequestFailedError("connection refused")
        >>> isinstance(error, FetchError), error.code
        (True, 'E_FAILED')

        ```
    """

    code: ClassVar[str] = "E_FAILED"

    def __init__(
        self,
        message: str,
        *,
        request: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.request = request
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ExpectError(FetchError):
    """The response status code did not match the expectation.

    Args:
        expected: The expectation, a status code, a tuple of status codes
            or ``None`` for the default 2xx range.
        status_code: The status code of the response.
        request: Optional summary of the request.

    Example:
        ```pycon
        >>> from jsonrequest.exceptions import ExpectError
        >>> str(ExpectError(expected=(200, 201), status_code=202))
        'Expected response statusCode to be one of [200, 201], but was 202'
        >>> str(ExpectError(expected=None, status_code=404))
        'Expected response statusCode to be 2xx, but was 404'

        ```
    """

    code: ClassVar[str] = "E_EXPECT"

    def __init__(
        self,
        *,
        expected: int | Sequence[int] | None,
        status_code: int,
        request: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"Expected response statusCode to be {_describe(expected)}, but was {status_code}",
            request=request,
        )
        self.expected = expected
        self.status_code = status_code


def _describe(expected: int | Sequence[int] | None) -> str:
    if expected is None:
        return "2xx"
    if isinstance(expected, int):
        return str(expected)
    return f"one of [{', '.join(str(code) for code in expected)}]"


class FetchTimeoutError(FetchError):
    """No response headers arrived within the configured timeout.

    Args:
        timeout: The timeout in milliseconds.
        request: Optional summary of the request.
    """

    code: ClassVar[str] = "E_TIMEOUT"

    def __init__(self, timeout: float, *, request: dict[str, Any] | None = None) -> None:
        super().__init__("Request timeout", request=request)
        self.timeout = timeout


class JsonParseError(FetchError):
    """The response declared JSON content but the body is not valid JSON.

    Args:
        body: The raw response text.
        cause: The decoding error.
        request: Optional summary of the request.
    """

    code: ClassVar[str] = "E_JSON"

    def __init__(
        self,
        body: str,
        *,
        cause: BaseException,
        request: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(str(cause), request=request, cause=cause)
        self.body = body


class RequestFailedError(FetchError):
    """The transport or the response stream failed."""

    code: ClassVar[str] = "E_FAILED"
