r"""jsonrequest - A small HTTP(S) request helper for JSON APIs.

This package issues a single HTTP or HTTPS request on top of the httpx
library, enforces a timeout on the response headers, validates the
response status code, follows one redirect and decodes JSON response
bodies. The outcome is delivered to a callback exactly once and is
recorded as a structured log entry.

Key Features:
    - JSON encoding of the request payload with computed Content-Length
    - Streamed request bodies from file-like objects and iterators
    - Timeout on the response headers
    - Status code expectation: a code, a list of codes, or any 2xx
    - One redirect hop for 302 responses, when 302 is expected
    - Stream mode handing back the raw response
    - Structured log entries with request, response and timings

Example:
    ```pycon
    >>> import asyncio
    >>> from jsonrequest import fetch
    >>> def on_done(error, data, response):
    ...     print(error, data)
    ...
    >>> asyncio.run(
    ...     fetch(
    ...         {"method": "POST", "hostname": "api.example.com", "path": "/items"},
    ...         {"name": "item"},
    ...         on_done,
    ...     )
    ... )  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "ExpectError",
    "FetchError",
    "FetchLogger",
    "FetchTimeoutError",
    "JsonParseError",
    "RequestFailedError",
    "RequestOptions",
    "UnsupportedProtocolError",
    "__version__",
    "fetch",
]

from importlib.metadata import PackageNotFoundError, version

from jsonrequest.core.options import RequestOptions
from jsonrequest.exceptions import (
    ExpectError,
    FetchError,
    FetchTimeoutError,
    JsonParseError,
    RequestFailedError,
    UnsupportedProtocolError,
)
from jsonrequest.fetch import fetch
from jsonrequest.utils.logger import FetchLogger

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
