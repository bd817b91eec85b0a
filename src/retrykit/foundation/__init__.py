"""Foundation - errors, result type, and configuration for retrykit."""

from __future__ import annotations

__all__ = [
    # Errors
    "FailureReason", "RetryFailure", "RetryableError",
    "RetryError", "NonRetryableError", "RetriesExhaustedError", "RetryCancelledError",
    "CancelledError", "DeadlineExceeded",
    "Result", "Ok", "Err",
    # Config
    "RetrykitSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("FailureReason", "RetryFailure", "RetryableError",
                "RetryError", "NonRetryableError", "RetriesExhaustedError", "RetryCancelledError",
                "CancelledError", "DeadlineExceeded", "Result", "Ok", "Err"):
        from . import errors
        return getattr(errors, name)

    if name in ("RetrykitSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
