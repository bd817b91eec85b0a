"""Retry engine: backoff, classification, policy and the attempt loop.

Example:
    >>> from retrykit.foundation.errors import RetryableError
    >>> from retrykit.runtime.retry import RetryPolicy, is_retryable_http_status, run
    >>> from retrykit.runtime.concurrency import CancelToken
    >>>
    >>> policy = RetryPolicy(max_attempts=3, initial_wait=0.01, max_wait=0.1,
    ...                      growth_factor=1.5, jitter_fraction=0.5)
    >>> def pay() -> str:
    ...     resp = gateway.charge(order)
    ...     if is_retryable_http_status(resp.status):
    ...         raise RetryableError(GatewayError(resp.status))
    ...     return resp.id
    >>>
    >>> result = run(pay, policy, token=CancelToken(timeout=10.0),
    ...              on_retry=lambda err, wait: metrics.incr("payments.retry"))
"""

from .backoff import Backoff, ExponentialBackoff, compute_wait, exponential_wait
from .classify import (
    RETRYABLE_HTTP_STATUSES,
    is_cancellation,
    is_connection_error,
    is_retryable,
    is_retryable_http_status,
    is_transient_network_error,
)
from .executor import Classifier, OnRetry, Retrier, RunResult, acall, arun, call, retry, run
from .policy import DEFAULT_POLICY, NO_RETRY, RetryPolicy

__all__ = [
    # Backoff
    "Backoff", "ExponentialBackoff", "compute_wait", "exponential_wait",
    # Classification
    "is_retryable", "is_retryable_http_status", "RETRYABLE_HTTP_STATUSES",
    "is_cancellation", "is_transient_network_error", "is_connection_error",
    # Policy
    "RetryPolicy", "DEFAULT_POLICY", "NO_RETRY",
    # Execution
    "run", "arun", "call", "acall", "Retrier", "retry",
    "RunResult", "OnRetry", "Classifier",
]
