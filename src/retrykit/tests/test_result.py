"""Tests for Result and the run failure taxonomy.

Validates:
- Ok/Err extraction and mapping
- Exhaustive matching
- RetryFailure reasons and their raisable forms
"""

from __future__ import annotations

import pytest

from retrykit import (
    CancelledError,
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


# ═════════════════════════════════════════════════════════════════════════════
# Result
# ═════════════════════════════════════════════════════════════════════════════


def test_ok_extraction() -> None:
    result: Result[int, str] = Ok(42)
    assert result.is_ok() and not result.is_err()
    assert result.unwrap() == 42
    assert result.ok() == 42 and result.err() is None
    assert bool(result)
    assert list(result) == [42]
    with pytest.raises(RuntimeError):
        result.unwrap_err()


def test_err_extraction() -> None:
    result: Result[int, str] = Err("fail")
    assert result.is_err()
    assert result.unwrap_err() == "fail"
    assert result.unwrap_or(0) == 0
    assert not bool(result)
    assert list(result) == []
    with pytest.raises(RuntimeError, match="fail"):
        result.unwrap()


def test_map_only_touches_ok() -> None:
    assert Ok(5).map(lambda x: x * 2) == Ok(10)
    assert Err("e").map(lambda x: x * 2) == Err("e")


def test_match_is_exhaustive() -> None:
    assert Ok(1).match(ok=lambda v: f"ok:{v}", err=lambda e: f"err:{e}") == "ok:1"
    assert Err("x").match(ok=lambda v: f"ok:{v}", err=lambda e: f"err:{e}") == "err:x"


def test_ok_and_err_never_equal() -> None:
    assert Ok(1) != Err(1)
    assert repr(Ok(1)) == "Ok(1)"
    assert repr(Err("x")) == "Err('x')"


# ═════════════════════════════════════════════════════════════════════════════
# Failure Taxonomy
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(("reason", "exc_type"), [
    (FailureReason.NON_RETRYABLE, NonRetryableError),
    (FailureReason.EXHAUSTED, RetriesExhaustedError),
    (FailureReason.CANCELLED, RetryCancelledError),
])
def test_failure_maps_to_exception(reason: FailureReason, exc_type: type[RetryError]) -> None:
    cause = CancelledError("stop") if reason is FailureReason.CANCELLED else None
    failure = RetryFailure(reason, TimeoutError("slow"), 3, cause)
    exc = failure.to_exception()
    assert type(exc) is exc_type
    assert isinstance(exc, RetryError)
    assert exc.failure is failure
    assert exc.reason is reason
    assert isinstance(exc.__cause__, TimeoutError)


def test_reasons_are_mutually_exclusive() -> None:
    for reason in FailureReason:
        failure = RetryFailure(reason, ValueError(), 1)
        flags = [failure.is_non_retryable, failure.is_exhausted, failure.is_cancelled]
        assert flags.count(True) == 1


def test_failure_messages() -> None:
    err = ConnectionResetError("reset by peer")
    assert str(RetryFailure(FailureReason.NON_RETRYABLE, err, 1)) == "not retryable error: reset by peer"
    assert "retries exceeded after 3 attempts" in str(RetryFailure(FailureReason.EXHAUSTED, err, 3))
    cancelled = RetryFailure(FailureReason.CANCELLED, err, 2, CancelledError("deadline"))
    assert "cancelled (deadline) after 2 attempts" in str(cancelled)


def test_retryable_marker_keeps_cause() -> None:
    inner = OSError("disk busy")
    marker = RetryableError(inner)
    assert marker.cause is inner
    assert marker.__cause__ is inner
    assert marker.retryable
    assert str(marker) == "disk busy"
    assert not RetryableError.fatal(inner).retryable
    assert "retryable=False" in repr(RetryableError.fatal(inner))


def test_failure_reason_values() -> None:
    assert FailureReason("EXHAUSTED") is FailureReason.EXHAUSTED
    assert {r.value for r in FailureReason} == {"NON_RETRYABLE", "EXHAUSTED", "CANCELLED"}


def test_layer_packages_reexport_lazily() -> None:
    from retrykit import CancelToken, RetryPolicy, foundation, runtime

    assert runtime.CancelToken is CancelToken
    assert runtime.RetryPolicy is RetryPolicy
    assert foundation.FailureReason is FailureReason
    with pytest.raises(AttributeError):
        runtime.does_not_exist  # noqa: B018


def test_retry_name_resolution() -> None:
    import inspect

    import retrykit
    from retrykit import runtime
    from retrykit.runtime.retry import retry as retry_decorator

    # the runtime layer exposes the subpackage under this name; the root exports the decorator
    assert "retry" not in runtime.__all__
    assert inspect.ismodule(runtime.retry)
    assert runtime.retry.retry is retry_decorator
    assert retrykit.retry is retry_decorator
