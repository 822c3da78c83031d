"""Errors raised by the retry executor."""


class RetryError(Exception):
    """Base class for terminal retry failures.

    Attributes:
        last_exception: Failure raised by the final attempt, if any
        attempts: Number of times the operation was invoked
    """

    def __init__(
        self,
        message: str,
        last_exception: Exception | None = None,
        attempts: int = 0
    ) -> None:
        super().__init__(message)
        self.last_exception = last_exception
        self.attempts = attempts


class RetriesExhaustedError(RetryError):
    """Raised when every allowed attempt has failed."""

    def __init__(self, last_exception: Exception | None = None, attempts: int = 0) -> None:
        super().__init__("Maximum retries exhausted!", last_exception, attempts)


class RetryCancelledError(RetryError):
    """Raised when the cancel event fires while waiting between attempts."""

    def __init__(self, last_exception: Exception | None = None, attempts: int = 0) -> None:
        super().__init__(
            f"Retry cancelled after {attempts} attempt(s)", last_exception, attempts
        )
