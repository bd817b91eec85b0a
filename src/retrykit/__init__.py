"""retrykit: bounded, backoff-governed retries for transiently failing operations.

Re-invokes an operation until it succeeds, exhausts its attempt budget,
fails with a non-retryable error, or is cancelled between attempts.

Quick Start:
    >>> from retrykit import CancelToken, RetryPolicy, RetryableError, run
    >>>
    >>> def fetch() -> bytes:
    ...     try:
    ...         return client.get("/inventory")
    ...     except TransportError as e:
    ...         raise RetryableError(e) from e
    >>>
    >>> result = run(fetch, RetryPolicy(max_attempts=5, initial_wait=0.1, max_wait=5.0, growth_factor=2.0))
    >>> if result.is_ok():
    ...     body = result.unwrap()
    ... elif result.unwrap_err().is_exhausted:
    ...     fall_back_to_cache()

Decorator form:
    >>> from retrykit import retry
    >>> @retry(RetryPolicy(max_attempts=3))
    ... async def ping(host: str) -> float: ...
"""

from .foundation.config import (
    LoggingSettings,
    RetrykitSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from .foundation.errors import (
    CancelledError,
    DeadlineExceeded,
    Err,
    FailureReason,
    NonRetryableError,
    Ok,
    Result,
    RetriesExhaustedError,
    RetryableError,
    RetryCancelledError,
    RetryError,
    RetryFailure,
)
from .runtime.concurrency import CancelToken
from .runtime.observability import configure_logging
from .runtime.retry import (
    DEFAULT_POLICY,
    NO_RETRY,
    RETRYABLE_HTTP_STATUSES,
    Backoff,
    ExponentialBackoff,
    Retrier,
    RetryPolicy,
    acall,
    arun,
    call,
    compute_wait,
    is_retryable,
    is_retryable_http_status,
    retry,
    run,
)

__version__ = "0.1.0"

__all__ = [
    # Execution
    "run", "arun", "call", "acall", "Retrier", "retry",
    # Policy & backoff
    "RetryPolicy", "DEFAULT_POLICY", "NO_RETRY", "compute_wait", "Backoff", "ExponentialBackoff",
    # Classification
    "is_retryable", "is_retryable_http_status", "RETRYABLE_HTTP_STATUSES",
    # Cancellation
    "CancelToken",
    # Errors & results
    "Result", "Ok", "Err", "FailureReason", "RetryFailure", "RetryableError",
    "RetryError", "NonRetryableError", "RetriesExhaustedError", "RetryCancelledError",
    "CancelledError", "DeadlineExceeded",
    # Config & logging
    "RetrykitSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
    "configure_logging",
]
