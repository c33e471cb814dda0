"""Shared fixtures for unit tests."""

import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging configuration left behind by a test.

    CLI tests configure logging against the runner's captured stderr, which
    is closed once the invocation returns.
    """
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers.clear()
