"""Runtime - retry execution, cancellation, and logging.

Contains: retry, concurrency, observability.
"""

from __future__ import annotations

__all__ = [
    # Retry
    "Backoff", "ExponentialBackoff", "compute_wait", "exponential_wait",
    "is_retryable", "is_retryable_http_status", "RETRYABLE_HTTP_STATUSES",
    "is_cancellation", "is_transient_network_error", "is_connection_error",
    "RetryPolicy", "DEFAULT_POLICY", "NO_RETRY",
    "run", "arun", "call", "acall", "Retrier", "RunResult", "OnRetry", "Classifier",
    # Concurrency
    "CancelToken", "checkpoint",
    # Observability
    "JsonFormatter", "configure_logging",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("CancelToken", "checkpoint"):
        from . import concurrency
        return getattr(concurrency, name)

    if name in ("JsonFormatter", "configure_logging"):
        from . import observability
        return getattr(observability, name)

    if name in __all__:
        from . import retry
        return getattr(retry, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
