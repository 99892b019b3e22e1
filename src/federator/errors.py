"""
Error types raised by the federator workflow.

Component errors carry the context of the failing operation (event, block
range, contract call) and are surfaced to the run controller, which decides
between retrying the pass and failing loudly.
"""

from typing import ClassVar


class FederatorError(Exception):
    """
    Base class for all federator errors.

    The run controller retries a pass only when the error is ``retryable``;
    any other federator error ends the run at once.
    """

    retryable: ClassVar[bool] = False

    def with_context(self, context: str) -> "FederatorError":
        """
        Return an error of the same type with ``context`` prefixed to the message.

        The original error is kept as ``__cause__``.
        """
        error = type(self)(f"{context}: {self}")
        error.__cause__ = self
        return error


class QueryError(FederatorError):
    """A chain read failed or returned an absent/invalid result."""

    retryable = True


class SubmissionError(FederatorError):
    """Sending a vote transaction failed."""

    retryable = True


class ConfigurationError(FederatorError, ValueError):
    """Required configuration is missing or invalid."""


class StorageError(FederatorError):
    """The checkpoint could not be persisted."""


class FatalFederatorError(FederatorError):
    """Raised by the run controller when a pass cannot be completed."""

    def __init__(self, message: str, attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts
