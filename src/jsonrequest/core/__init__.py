r"""Core request logic: options, status classification and redirects."""

from __future__ import annotations

__all__ = [
    "NormalizedRequest",
    "OutcomeKind",
    "RequestOptions",
    "ResponseOutcome",
    "check_status",
    "classify_payload",
    "is_expected",
    "normalize_request",
    "prune_redirect_expectation",
    "redirect_options",
]

from jsonrequest.core.options import (
    NormalizedRequest,
    RequestOptions,
    classify_payload,
    normalize_request,
)
from jsonrequest.core.outcome import OutcomeKind, ResponseOutcome
from jsonrequest.core.redirect import redirect_options
from jsonrequest.core.status import check_status, is_expected, prune_redirect_expectation
