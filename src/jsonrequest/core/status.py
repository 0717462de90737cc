r"""Status code classification against the expectation policy."""

from __future__ import annotations

__all__ = ["check_status", "is_expected", "prune_redirect_expectation"]

from jsonrequest.core.config import DEFAULT_SUCCESS_RANGE, REDIRECT_STATUS_CODE
from jsonrequest.exceptions import ExpectError


def is_expected(status_code: int, expect: int | tuple[int, ...] | None) -> bool:
    """Indicate whether a status code satisfies the expectation.

    Args:
        status_code: The response status code.
        expect: A status code which must match exactly, a tuple of
            accepted status codes, or ``None`` to accept any 2xx status.

    Returns:
        ``True`` if the status code is accepted, otherwise ``False``.

    Example:
        ```pycon
        >>> from jsonrequest.core.status import is_expected
        >>> is_expected(201, None)
        True
        >>> is_expected(201, 200)
        False
        >>> is_expected(304, (200, 304))
        True

        ```
    """
    if expect is None:
        low, high = DEFAULT_SUCCESS_RANGE
        return low <= status_code <= high
    if isinstance(expect, int):
        return status_code == expect
    return status_code in expect


def check_status(
    status_code: int,
    expect: int | tuple[int, ...] | None,
    *,
    request: dict | None = None,
) -> ExpectError | None:
    """Classify a status code, independently of the response body.

    Args:
        status_code: The response status code.
        expect: The expectation policy, see ``is_expected``.
        request: Optional request summary attached to the error.

    Returns:
        ``None`` if the status code is accepted, otherwise the
        ``ExpectError`` describing the mismatch.
    """
    if is_expected(status_code, expect):
        return None
    return ExpectError(expected=expect, status_code=status_code, request=request)


def prune_redirect_expectation(
    expect: int | tuple[int, ...] | None,
) -> int | tuple[int, ...] | None:
    """Compute the expectation carried forward to the redirect hop.

    The redirect status code is removed so the second hop cannot redirect
    again. A single remaining value collapses to a scalar and an empty
    remainder falls back to the default 2xx policy.

    Args:
        expect: The expectation of the hop that redirected.

    Returns:
        The expectation of the redirect hop.

    Example:
        ```pycon
        >>> from jsonrequest.core.status import prune_redirect_expectation
        >>> prune_redirect_expectation((200, 302))
        200
        >>> prune_redirect_expectation((200, 201, 302))
        (200, 201)
        >>> prune_redirect_expectation(302) is None
        True

        ```
    """
    if expect is None:
        return None
    if isinstance(expect, int):
        return None if expect == REDIRECT_STATUS_CODE else expect
    remaining = tuple(code for code in expect if code != REDIRECT_STATUS_CODE)
    if not remaining:
        return None
    if len(remaining) == 1:
        return remaining[0]
    return remaining
