"""Bounded retry executor with a fixed delay between attempts."""

import asyncio
import functools
import inspect
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from retry_executor.config import Settings
from retry_executor.exceptions import RetriesExhaustedError, RetryCancelledError

logger = logging.getLogger(__name__)

Operation = Callable[[], Any]
"""Zero-argument unit of work. Raising an exception counts as a failed attempt."""

RetryCallback = Callable[[Exception, int, float], None]
"""Called once per scheduled retry with (error, failed_attempt_number, delay)."""


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait in between.

    Attributes:
        max_retries: Retries allowed after the first attempt (default: 3)
        delay: Seconds to wait before each retry, identical for every retry (default: 1.0)
    """
    max_retries: int = 3
    delay: float = 1.0

    def __post_init__(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ValueError(f"max_retries must be an integer, got {self.max_retries!r}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if not math.isfinite(self.delay):
            raise ValueError(f"delay must be finite, got {self.delay}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    @property
    def max_attempts(self) -> int:
        """Total number of invocations, counting the first attempt."""
        return self.max_retries + 1

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        """Build a policy from application settings."""
        return cls(max_retries=settings.max_retries, delay=settings.retry_delay_seconds)


class RetryPhase(Enum):
    """Lifecycle of a single executor invocation."""
    IDLE = "idle"
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS: dict[RetryPhase, frozenset[RetryPhase]] = {
    RetryPhase.IDLE: frozenset({RetryPhase.ATTEMPTING}),
    RetryPhase.ATTEMPTING: frozenset({RetryPhase.SUCCEEDED, RetryPhase.FAILED, RetryPhase.WAITING}),
    # WAITING -> FAILED only on cancellation
    RetryPhase.WAITING: frozenset({RetryPhase.ATTEMPTING, RetryPhase.FAILED}),
    RetryPhase.SUCCEEDED: frozenset(),
    RetryPhase.FAILED: frozenset(),
}


@dataclass
class RetryState:
    """Bookkeeping for one in-flight invocation. Never shared between invocations."""
    remaining_retries: int
    delay: float
    phase: RetryPhase = RetryPhase.IDLE
    attempts: int = 0
    last_error: Exception | None = None

    @property
    def is_terminal(self) -> bool:
        return self.phase in (RetryPhase.SUCCEEDED, RetryPhase.FAILED)

    def transition(self, phase: RetryPhase) -> None:
        """Move to ``phase``.

        Raises:
            RuntimeError: If the move is not allowed from the current phase
        """
        if phase not in _TRANSITIONS[self.phase]:
            raise RuntimeError(
                f"Invalid retry transition {self.phase.value} -> {phase.value}"
            )
        self.phase = phase


async def _invoke(operation: Operation) -> Any:
    result = operation()
    if inspect.isawaitable(result):
        result = await result
    return result


async def _wait(delay: float, cancel_event: asyncio.Event | None) -> bool:
    """Sleep for ``delay`` seconds. Returns True if ``cancel_event`` fired instead."""
    if cancel_event is None:
        # sleep(0) still yields to the loop
        await asyncio.sleep(delay)
        return False

    if cancel_event.is_set():
        return True

    if delay <= 0:
        await asyncio.sleep(0)
        return cancel_event.is_set()

    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
    except TimeoutError:
        return False
    return True


class RetryExecutor:
    """Runs an operation until it succeeds or the retry budget is spent.

    The first attempt is made immediately. After each failure, if retries
    remain, the executor waits ``policy.delay`` seconds and tries again.
    The executor keeps no state between calls to :meth:`execute`, so one
    instance can serve any number of concurrent invocations.

    Usage:
        executor = RetryExecutor(RetryPolicy(max_retries=3, delay=0.5))
        data = await executor.execute(client.fetch_json)
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        on_retry: RetryCallback | None = None,
        name: str | None = None
    ) -> None:
        """Initialize the executor.

        Args:
            policy: Retry budget and delay (uses defaults if not provided)
            on_retry: Optional callback called before each wait
            name: Operation name for logging (defaults to the operation's __name__)
        """
        self._policy = policy or RetryPolicy()
        self._on_retry = on_retry
        self._name = name

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def execute(
        self,
        operation: Operation,
        *,
        cancel_event: asyncio.Event | None = None
    ) -> Any:
        """Invoke ``operation`` with retries.

        Args:
            operation: Zero-argument callable returning an awaitable or a value
            cancel_event: When set during a wait, stops retrying

        Returns:
            Value of the first successful attempt

        Raises:
            RetriesExhaustedError: If the attempt made with no retries left also fails
            RetryCancelledError: If ``cancel_event`` fires between attempts
        """
        state = RetryState(
            remaining_retries=self._policy.max_retries,
            delay=self._policy.delay,
        )
        name = self._name or getattr(operation, "__name__", repr(operation))

        while True:
            state.transition(RetryPhase.ATTEMPTING)
            state.attempts += 1
            logger.debug(f"Retries left for {name}: {state.remaining_retries}")

            try:
                result = await _invoke(operation)
            except Exception as e:
                state.last_error = e

                if state.remaining_retries <= 0:
                    state.transition(RetryPhase.FAILED)
                    logger.error(
                        f"Max retries ({self._policy.max_retries}) exhausted "
                        f"for {name} after {state.attempts} attempt(s): {e}"
                    )
                    raise RetriesExhaustedError(e, state.attempts) from e

                state.remaining_retries -= 1
                state.transition(RetryPhase.WAITING)
                logger.warning(
                    f"Attempt {state.attempts}/{self._policy.max_attempts} "
                    f"for {name} failed: {e}. Retrying in {state.delay:.3f}s..."
                )

                if self._on_retry:
                    self._on_retry(e, state.attempts, state.delay)

                if await _wait(state.delay, cancel_event):
                    state.transition(RetryPhase.FAILED)
                    logger.warning(f"Retry of {name} cancelled after {state.attempts} attempt(s)")
                    raise RetryCancelledError(e, state.attempts) from e
                continue

            state.transition(RetryPhase.SUCCEEDED)
            if state.attempts > 1:
                logger.info(f"{name} succeeded on attempt {state.attempts}")
            return result


async def execute(
    operation: Operation,
    max_retries: int = 3,
    delay: float = 1.0,
    *,
    cancel_event: asyncio.Event | None = None,
    on_retry: RetryCallback | None = None
) -> Any:
    """Execute an operation with bounded retries (functional API).

    Args:
        operation: Zero-argument callable returning an awaitable or a value
        max_retries: Retries allowed after the first attempt
        delay: Seconds to wait before each retry
        cancel_event: When set during a wait, stops retrying
        on_retry: Optional callback called before each wait

    Returns:
        Value of the first successful attempt

    Example:
        data = await execute(fetch_data, max_retries=3, delay=0.001)
    """
    executor = RetryExecutor(RetryPolicy(max_retries, delay), on_retry=on_retry)
    return await executor.execute(operation, cancel_event=cancel_event)


def with_retry(
    policy: RetryPolicy | None = None,
    on_retry: RetryCallback | None = None
) -> Callable[[Callable[..., Any]], Callable[..., Awaitable[Any]]]:
    """Decorator that retries every call of the wrapped function.

    Call arguments are bound before the first attempt, so each retry sees the
    same arguments. The decorated function is always a coroutine function.

    Example:
        @with_retry(RetryPolicy(max_retries=5, delay=2.0))
        async def fetch_data():
            return await api.get_data()
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
        executor = RetryExecutor(policy, on_retry=on_retry, name=func.__name__)

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            return await executor.execute(functools.partial(func, *args, **kwargs))

        return wrapper

    return decorator
