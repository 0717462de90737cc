r"""Response body helpers: content type inspection and JSON decoding."""

from __future__ import annotations

__all__ = ["is_json_content_type", "is_textual_content_type", "media_type", "parse_json_body"]

import json
from typing import Any

from jsonrequest.core.config import JSON_CONTENT_TYPE
from jsonrequest.exceptions import JsonParseError

_TEXTUAL_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/x-www-form-urlencoded",
        "application/xml",
    }
)


def media_type(content_type: str | None) -> str | None:
    """Return the media type of a content type header, without
    parameters.

    Example:
        ```pycon
        >>> from jsonrequest.utils.body import media_type
        >>> media_type("application/json; charset=utf-8")
        'application/json'

        ```
    """
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower()


def is_json_content_type(content_type: str | None) -> bool:
    return media_type(content_type) == JSON_CONTENT_TYPE


def is_textual_content_type(content_type: str | None) -> bool:
    """Indicate whether a body of this content type can be logged as
    text.

    Example:
        ```pycon
        >>> from jsonrequest.utils.body import is_textual_content_type
        >>> is_textual_content_type("text/html; charset=utf-8")
        True
        >>> is_textual_content_type("application/problem+json")
        True
        >>> is_textual_content_type("image/png")
        False

        ```
    """
    kind = media_type(content_type)
    if kind is None:
        return False
    return (
        kind.startswith("text/")
        or kind in _TEXTUAL_TYPES
        or kind.endswith(("+json", "+xml"))
    )


def parse_json_body(body: str, *, request: dict[str, Any] | None = None) -> Any:
    """Decode a JSON response body.

    Args:
        body: The response text.
        request: Optional request summary attached to the error.

    Returns:
        The decoded value.

    Raises:
        JsonParseError: If the body is not valid JSON.

    Example:
        ```pycon
        >>> from jsonrequest.utils.body import parse_json_body
        >>> parse_json_body('{"some":"payload"}')
        {'some': 'payload'}

        ```
    """
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise JsonParseError(body, cause=exc, request=request) from exc
