r"""Utility functions for logging, callbacks and response bodies."""

from __future__ import annotations

__all__ = [
    "CallbackSlot",
    "FetchLogger",
    "StructuredFormatter",
    "get_default_logger",
    "is_json_content_type",
    "is_textual_content_type",
    "log_structured",
    "parse_json_body",
]

from jsonrequest.utils.body import (
    is_json_content_type,
    is_textual_content_type,
    parse_json_body,
)
from jsonrequest.utils.callbacks import CallbackSlot
from jsonrequest.utils.logger import FetchLogger, get_default_logger
from jsonrequest.utils.structured_logging import StructuredFormatter, log_structured
