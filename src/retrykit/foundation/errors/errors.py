"""Error taxonomy for retried operations.

- RetryableError: marker wrapping an operation failure with an explicit retry tag
- FailureReason / RetryFailure: terminal outcome of a run, carried in Err
- RetryError and subclasses: raisable forms of a RetryFailure
- CancelledError / DeadlineExceeded: causes attached by a CancelToken
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Self


class FailureReason(StrEnum):
    """Why a run ended without success.

    Exactly one reason per failed run. Used for programmatic branching
    (alert, fall back, or drop) instead of parsing messages.
    """
    NON_RETRYABLE = "NON_RETRYABLE"
    EXHAUSTED = "EXHAUSTED"
    CANCELLED = "CANCELLED"


class RetryableError(Exception):
    """Explicit retry tag around an operation failure.

    The classifier honours the tag before looking at the cause, so an
    operation can force a retry for any underlying error (or refuse one
    with ``retryable=False``). A cancellation cause is never retried.

    Example:
        >>> def charge():
        ...     resp = client.post("/payments", json=body)
        ...     if is_retryable_http_status(resp.status_code):
        ...         raise RetryableError(HTTPStatusError(resp.status_code))
        ...     return resp
    """

    def __init__(self, cause: BaseException, *, retryable: bool = True) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.retryable = retryable
        self.__cause__ = cause

    @classmethod
    def fatal(cls, cause: BaseException) -> Self:
        """Tag a failure as never retryable."""
        return cls(cause, retryable=False)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.cause!r}, retryable={self.retryable})"


class CancelledError(Exception):
    """Cancellation cause recorded by a CancelToken."""

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(reason)
        self.reason = reason


class DeadlineExceeded(CancelledError):
    """CancelToken deadline elapsed."""

    def __init__(self, timeout: float) -> None:
        super().__init__(f"deadline of {timeout:g}s exceeded")
        self.timeout = timeout


@dataclass(frozen=True, slots=True)
class RetryFailure:
    """Terminal failure of a run.

    Attributes:
        reason: Which terminal state ended the run
        error: Last exception raised by the operation (the token's cause
            when cancelled before any attempt)
        attempts: Number of operation invocations performed
        cause: Cancellation cause, set only for CANCELLED
    """

    reason: FailureReason
    error: BaseException
    attempts: int
    cause: CancelledError | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.reason is FailureReason.CANCELLED

    @property
    def is_exhausted(self) -> bool:
        return self.reason is FailureReason.EXHAUSTED

    @property
    def is_non_retryable(self) -> bool:
        return self.reason is FailureReason.NON_RETRYABLE

    @property
    def message(self) -> str:
        match self.reason:
            case FailureReason.NON_RETRYABLE:
                return f"not retryable error: {self.error}"
            case FailureReason.EXHAUSTED:
                return f"retries exceeded after {self.attempts} attempts: {self.error}"
            case FailureReason.CANCELLED:
                return f"cancelled ({self.cause}) after {self.attempts} attempts: {self.error}"

    def to_exception(self) -> RetryError:
        """Raisable form, chained to the last operation error."""
        exc = _REASON_ERRORS[self.reason](self)
        exc.__cause__ = self.error
        return exc

    def __str__(self) -> str:
        return self.message


class RetryError(Exception):
    """Base for raised run failures. ``failure`` holds the full outcome."""

    def __init__(self, failure: RetryFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def reason(self) -> FailureReason:
        return self.failure.reason

    @property
    def last_error(self) -> BaseException:
        return self.failure.error

    @property
    def attempts(self) -> int:
        return self.failure.attempts


class NonRetryableError(RetryError):
    """Operation failed with an error classified as fatal."""


class RetriesExhaustedError(RetryError):
    """Every permitted attempt failed retryably."""


class RetryCancelledError(RetryError):
    """Cancellation signal fired while waiting between attempts."""


_REASON_ERRORS: dict[FailureReason, type[RetryError]] = {
    FailureReason.NON_RETRYABLE: NonRetryableError,
    FailureReason.EXHAUSTED: RetriesExhaustedError,
    FailureReason.CANCELLED: RetryCancelledError,
}
