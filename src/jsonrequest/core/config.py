r"""Default configurations for JSON requests.

This module provides the configuration constants shared by the option
normalizer, the status classifier and the redirect coordinator.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_METHOD",
    "DEFAULT_PATH",
    "DEFAULT_PROTOCOL",
    "DEFAULT_SUCCESS_RANGE",
    "FETCH_LOGGER_NAME",
    "JSON_CONTENT_TYPE",
    "MAX_HOPS",
    "ORCHESTRATION_KEYS",
    "REDIRECT_STATUS_CODE",
    "STREAM_CHUNK_SIZE",
    "SUPPORTED_PROTOCOLS",
]

# Scheme used when the options do not name one
DEFAULT_PROTOCOL = "https"

# The only two schemes a request can be issued with
SUPPORTED_PROTOCOLS = ("http", "https")

DEFAULT_METHOD = "GET"
DEFAULT_HOST = "localhost"
DEFAULT_PATH = "/"

# The one status code that triggers a redirect hop
REDIRECT_STATUS_CODE = 302

# Total number of hops per logical request: the original one plus one redirect
MAX_HOPS = 2

# Inclusive status range accepted when no expectation is configured
DEFAULT_SUCCESS_RANGE = (200, 299)

JSON_CONTENT_TYPE = "application/json"

# Read size used when piping a file-like payload into the request
STREAM_CHUNK_SIZE = 64 * 1024

DEFAULT_LOGGER_NAME = "jsonrequest"
FETCH_LOGGER_NAME = "fetch"

# Keys consumed by the orchestration and never forwarded to the transport
ORCHESTRATION_KEYS = frozenset({"timeout", "expect", "stream", "log", "protocol"})
