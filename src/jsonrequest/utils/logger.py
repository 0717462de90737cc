r"""Structured request logger.

This module provides the logger the request orchestration writes its
entries to. It wraps a standard ``logging.Logger`` and attaches the
structured fields (``request``, ``response``, ``ms_head``, ``ms_body``,
``ms``) through the ``extra`` mechanism, so they show up as JSON keys
when the ``StructuredFormatter`` is used.

Example:
    ```pycon
    >>> import logging
    >>> from jsonrequest.utils.logger import FetchLogger
    >>> log = FetchLogger(logging.getLogger("my_app")).child("fetch")
    >>> log.name
    'my_app.fetch'

    ```
"""

from __future__ import annotations

__all__ = ["FetchLogger", "get_default_logger"]

import logging
from typing import Any

from jsonrequest.core.config import DEFAULT_LOGGER_NAME
from jsonrequest.utils.structured_logging import log_structured

# Level of the "fetch" and "finish" entries
FETCH_LEVEL = logging.INFO


class FetchLogger:
    """Logger adapter writing one structured entry per request event.

    Args:
        logger: The underlying standard library logger.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @classmethod
    def from_logger(cls, logger: logging.Logger | FetchLogger) -> FetchLogger:
        """Wrap a standard library logger, or return a ``FetchLogger`` as
        it is."""
        if isinstance(logger, FetchLogger):
            return logger
        return cls(logger)

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def child(self, name: str) -> FetchLogger:
        """Return a logger scoped to ``name`` below this one."""
        return FetchLogger(self._logger.getChild(name))

    def fetch(self, message: str = "fetch", **fields: Any) -> None:
        """Log a completed step of a request (response received, redirect
        followed, stream handed over)."""
        log_structured(self._logger, FETCH_LEVEL, message, **_drop_none(fields))

    def finish(self, message: str = "finish", **fields: Any) -> None:
        """Log the end of a response body consumed by the caller."""
        log_structured(self._logger, FETCH_LEVEL, message, **_drop_none(fields))

    def warn(self, message: str, **fields: Any) -> None:
        log_structured(self._logger, logging.WARNING, message, **_drop_none(fields))

    def error(self, message: str, **fields: Any) -> None:
        log_structured(self._logger, logging.ERROR, message, **_drop_none(fields))

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(name={self.name!r})"


def _drop_none(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def get_default_logger(name: str = DEFAULT_LOGGER_NAME) -> FetchLogger:
    """Return the package logger used when the caller provides none.

    Args:
        name: The name of the underlying standard library logger.

    Returns:
        The logger.

    Example:
        ```pycon
        >>> from jsonrequest.utils.logger import get_default_logger
        >>> get_default_logger().name
        'jsonrequest'

        ```
    """
    return FetchLogger(logging.getLogger(name))
