from __future__ import annotations

import logging
from unittest.mock import Mock

import pytest


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback receiving the request outcome."""
    return Mock()


@pytest.fixture
def request_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture the entries written by the package logger."""
    caplog.set_level(logging.INFO, logger="jsonrequest")
    return caplog
