r"""Parameter validation utilities for JSON requests.

This module provides validation functions for the orchestration options
to make sure they meet the required constraints before any network I/O
happens.
"""

from __future__ import annotations

__all__ = ["normalize_protocol", "validate_expect", "validate_timeout"]

from jsonrequest.core.config import SUPPORTED_PROTOCOLS
from jsonrequest.exceptions import UnsupportedProtocolError


def normalize_protocol(protocol: str) -> str:
    """Normalize and validate a protocol name.

    Args:
        protocol: The protocol, with or without the trailing colon
            (e.g. ``"https"`` or ``"https:"``).

    Returns:
        The protocol name without the trailing colon.

    Raises:
        UnsupportedProtocolError: If the protocol is neither ``http`` nor
            ``https``.

    Example:
        ```pycon
        >>> from jsonrequest.core.validation import normalize_protocol
        >>> normalize_protocol("https:")
        'https'
        >>> normalize_protocol("ftp:")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        jsonrequest.exceptions.UnsupportedProtocolError: Unsupported protocol "ftp:"

        ```
    """
    name = protocol[:-1] if isinstance(protocol, str) and protocol.endswith(":") else protocol
    if name not in SUPPORTED_PROTOCOLS:
        raise UnsupportedProtocolError(protocol)
    return name


def validate_timeout(timeout: float | None) -> None:
    """Validate the timeout parameter.

    Args:
        timeout: Time in milliseconds to wait for the response headers.
            ``None`` or ``0`` disables the timeout.

    Raises:
        ValueError: If timeout is negative.

    Example:
        ```pycon
        >>> from jsonrequest.core.validation import validate_timeout
        >>> validate_timeout(5000)
        >>> validate_timeout(None)
        >>> validate_timeout(-1)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be >= 0, got -1

        ```
    """
    if timeout is not None and timeout < 0:
        msg = f"timeout must be >= 0, got {timeout}"
        raise ValueError(msg)


def validate_expect(expect: int | tuple[int, ...] | list[int] | None) -> None:
    """Validate the expected status specification.

    Args:
        expect: A status code, a sequence of status codes or ``None``.

    Raises:
        ValueError: If the expectation contains anything but integers, or
            is an empty sequence.
    """
    if expect is None:
        return
    codes = expect if isinstance(expect, (list, tuple)) else (expect,)
    if not codes:
        msg = "expect must not be an empty sequence"
        raise ValueError(msg)
    for code in codes:
        if isinstance(code, bool) or not isinstance(code, int):
            msg = f"expect must contain integer status codes, got {code!r}"
            raise ValueError(msg)
