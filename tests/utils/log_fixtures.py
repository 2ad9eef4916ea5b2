# tests/utils/log_fixtures.py
"""Reusable fixtures for testing the dvln output logger."""

import uuid

import pytest

import dvln.logs as mod_logs
from dvln.utils_logs import make_test_trace


__all__ = ["direct_logger", "make_test_trace"]

TEST_TRACE = make_test_trace(icon="📏")


def _suffix() -> str:
    return "_" + uuid.uuid4().hex[:6]


@pytest.fixture
def direct_logger() -> mod_logs.AppLogger:
    """Create a brand-new AppLogger with no shared state.

    Only for testing the logger itself; getAppLogger() is untouched.
    """
    # Give each test's logger a unique name for debug clarity
    name = f"test_logger{_suffix()}"
    logger = mod_logs.AppLogger(name, enable_color=False)
    TEST_TRACE("direct_logger fixture", f"id={id(logger)}", f"name={name}")
    return logger
