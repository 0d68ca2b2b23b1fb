"""Error taxonomy shared by the data-access layer and the HTTP boundary.

The boundary maps ValidationError to 400 and every other RolodexError to 500.
"""


class RolodexError(Exception):
    """Base class for all errors raised by the contact core."""


class ValidationError(RolodexError):
    """Missing or malformed input. Never reaches the store."""


class EmptyBatch(ValidationError):
    """A sync batch with zero records."""

    def __init__(self, message: str = "contacts must be a non-empty list.") -> None:
        super().__init__(message)


class PoolError(RolodexError):
    """The pool could not hand out a connection."""


class PoolExhausted(PoolError):
    """All connections stayed leased for the whole acquire timeout."""


class Unreachable(PoolError):
    """The startup probe failed on every attempt."""

    def __init__(self, attempts: int, last_error: str) -> None:
        super().__init__(f"Store unreachable after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class QueryTimeout(RolodexError):
    """A statement did not finish before its deadline.

    The statement itself may still complete in the background.
    """

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Query timed out after {timeout:g}s")
        self.timeout = timeout


class StoreError(RolodexError):
    """The store rejected a statement or the connection broke mid-operation."""
