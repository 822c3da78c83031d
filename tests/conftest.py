"""Shared test fixtures."""

import pytest

from retry_executor.logger import reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    """Start every test with untouched package loggers so caplog sees their records."""
    reset_logging()
    yield
    reset_logging()
