"""Bounded retry executor for asyncio operations."""

from retry_executor.exceptions import RetriesExhaustedError, RetryCancelledError, RetryError
from retry_executor.executor import (
    RetryExecutor,
    RetryPhase,
    RetryPolicy,
    RetryState,
    execute,
    with_retry,
)

__version__ = "0.1.0"

__all__ = [
    "execute",
    "with_retry",
    "RetryExecutor",
    "RetryPolicy",
    "RetryPhase",
    "RetryState",
    "RetryError",
    "RetriesExhaustedError",
    "RetryCancelledError",
]
