"""Unified error handling for retrykit.

- RetryableError: explicit retry marker for operation failures
- FailureReason/RetryFailure: terminal run outcomes
- RetryError hierarchy: raisable failures for call()/acall()
- Result/Ok/Err: success/failure sum type returned by run()/arun()
"""

from .errors import (
    CancelledError,
    DeadlineExceeded,
    FailureReason,
    NonRetryableError,
    RetriesExhaustedError,
    RetryableError,
    RetryCancelledError,
    RetryError,
    RetryFailure,
)
from .result import Err, Ok, Result

__all__ = [
    # Taxonomy
    "FailureReason", "RetryFailure", "RetryableError",
    "RetryError", "NonRetryableError", "RetriesExhaustedError", "RetryCancelledError",
    "CancelledError", "DeadlineExceeded",
    # Result
    "Result", "Ok", "Err",
]
