r"""Redirect target resolution for the single redirect hop."""

from __future__ import annotations

__all__ = ["is_redirect", "redirect_options"]

from typing import TYPE_CHECKING, Any

import httpx

from jsonrequest.core.config import REDIRECT_STATUS_CODE
from jsonrequest.core.status import prune_redirect_expectation

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jsonrequest.core.options import RequestOptions


def is_redirect(response: httpx.Response) -> bool:
    """Indicate whether a response asks for the redirect hop.

    Args:
        response: The response, with its headers received.

    Returns:
        ``True`` for a 302 response with a non-empty ``location`` header.
    """
    return response.status_code == REDIRECT_STATUS_CODE and bool(
        response.headers.get("location")
    )


def redirect_options(
    options: Mapping[str, Any], current: RequestOptions, location: str
) -> dict[str, Any]:
    """Compute the options of the redirect hop.

    The location is resolved against the effective URL of the current
    hop, so both absolute and path-only locations are supported. The
    resolved scheme, host, port and path override the original ones,
    every other option (headers, method, timeout, ...) is carried
    forward, and the expectation is pruned of the redirect status code.
    The caller mapping is not modified.

    Args:
        options: The option mapping of the current hop.
        current: The validated options of the current hop.
        location: The ``location`` response header.

    Returns:
        A new option mapping for the redirect hop.

    Example:
        ```pycon
        >>> from jsonrequest.core.options import RequestOptions
        >>> from jsonrequest.core.redirect import redirect_options
        >>> options = {"host": "a.com", "port": 8080, "path": "/x", "expect": [200, 302]}
        >>> current = RequestOptions.from_mapping(options)
        >>> redirect = redirect_options(options, current, "/some/path?q=1")
        >>> redirect["host"], redirect["port"], redirect["path"], redirect["expect"]
        ('a.com', 8080, '/some/path?q=1', 200)

        ```
    """
    target = httpx.URL(current.url).join(location)
    redirect = {key: value for key, value in options.items() if key != "hostname"}
    redirect["protocol"] = target.scheme
    redirect["host"] = target.host
    redirect["path"] = target.raw_path.decode("ascii")
    if target.port is None:
        redirect.pop("port", None)
    else:
        redirect["port"] = target.port
    expect = prune_redirect_expectation(current.expect)
    if expect is None:
        redirect.pop("expect", None)
    else:
        redirect["expect"] = expect
    return redirect
