"""Retry executor: the attempt loop.

Drives an operation until it succeeds, fails fatally, exhausts its attempt
budget, or is cancelled while waiting between attempts. Exactly one of
those four terminal states is reached per run, reported as
``Ok(value)`` or ``Err(RetryFailure)``.

Loop per attempt (0-indexed):
    invoke → classify → budget check → backoff → notify → cancellable wait

Cancellation is cooperative: the token is observed only during waits,
never inside an in-flight operation, so the first attempt always runs.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, ParamSpec, TypeVar

from retrykit.foundation.errors import Err, FailureReason, Ok, Result, RetryFailure
from retrykit.runtime.concurrency import CancelToken, checkpoint

from .backoff import compute_wait
from .classify import is_retryable
from .policy import DEFAULT_POLICY, RetryPolicy

if TYPE_CHECKING:
    from retrykit.foundation.errors import CancelledError

T = TypeVar("T")
P = ParamSpec("P")

OnRetry = Callable[[BaseException, float], None]
Classifier = Callable[[BaseException], bool]
RunResult = Result[T, RetryFailure]

logger = logging.getLogger("retrykit.retry")


# ═══════════════════════════════════════════════════════════════════════════════
# Shared Steps
# ═══════════════════════════════════════════════════════════════════════════════


def _notify(on_retry: OnRetry | None, err: BaseException, wait: float) -> None:
    """Invoke the retry callback. A failing callback is logged and ignored."""
    if on_retry is None:
        return
    try:
        on_retry(err, wait)
    except Exception:
        logger.warning("on_retry callback raised; continuing", exc_info=True)


def _settle(
    err: Exception, attempt: int, policy: RetryPolicy, classifier: Classifier,
) -> RetryFailure | None:
    """Terminal failure for a failed attempt, or None when a retry is due."""
    attempts = attempt + 1
    if not classifier(err):
        logger.info(f"Attempt {attempts}/{policy.max_attempts} failed, not retryable: {err!r}")
        return RetryFailure(FailureReason.NON_RETRYABLE, err, attempts)
    if policy.is_last(attempt):
        logger.info(f"Attempt {attempts}/{policy.max_attempts} failed, retries exhausted: {err!r}")
        return RetryFailure(FailureReason.EXHAUSTED, err, attempts)
    return None


def _cancelled(err: BaseException, attempts: int, cause: CancelledError | None) -> RetryFailure:
    logger.info(f"Cancelled after {attempts} attempt(s): {cause}")
    return RetryFailure(FailureReason.CANCELLED, err, attempts, cause)


# ═══════════════════════════════════════════════════════════════════════════════
# Sync Execution
# ═══════════════════════════════════════════════════════════════════════════════


def run(
    operation: Callable[[], T],
    policy: RetryPolicy = DEFAULT_POLICY,
    *,
    token: CancelToken | None = None,
    on_retry: OnRetry | None = None,
    classifier: Classifier = is_retryable,
    rng: random.Random | None = None,
) -> Result[T, RetryFailure]:
    """Run ``operation`` under ``policy`` on the calling thread.

    Args:
        operation: Zero-argument callable; failure is signalled by raising
        policy: Attempt budget and backoff shape
        token: Cancellation signal raced against each wait
        on_retry: Called with (error, wait_seconds) before each wait
        classifier: Retryable predicate, ``is_retryable`` by default
        rng: Jitter source; a fresh independently seeded one per run by default

    Returns:
        Ok(operation's value) or Err(RetryFailure) with the terminal reason
        and the last operation error

    Example:
        >>> result = run(lambda: fetch("/orders"), RetryPolicy(max_attempts=5))
        >>> if result.is_err() and result.unwrap_err().is_exhausted:
        ...     page_oncall()
    """
    token = token or CancelToken()
    rng = rng or random.Random()

    attempt = 0
    while True:
        try:
            value = operation()
        except Exception as e:
            logger.debug(f"Attempt {attempt + 1}/{policy.max_attempts} failed: {e!r}")
            if (failure := _settle(e, attempt, policy, classifier)) is not None:
                return Err(failure)
            wait = compute_wait(attempt, policy, rng)
            logger.debug(f"Retry {attempt + 1}/{policy.max_attempts - 1} after {wait:.3f}s")
            _notify(on_retry, e, wait)
            if token.wait(wait):
                return Err(_cancelled(e, attempt + 1, token.cause))
            attempt += 1
        else:
            return Ok(value)


def call(
    operation: Callable[[], T],
    policy: RetryPolicy = DEFAULT_POLICY,
    *,
    token: CancelToken | None = None,
    on_retry: OnRetry | None = None,
    classifier: Classifier = is_retryable,
    rng: random.Random | None = None,
) -> T:
    """Like ``run`` but returns the value or raises a RetryError subclass.

    Raises:
        NonRetryableError / RetriesExhaustedError / RetryCancelledError,
        each chained to the last operation error
    """
    result = run(operation, policy, token=token, on_retry=on_retry, classifier=classifier, rng=rng)
    if result.is_ok():
        return result.unwrap()
    failure = result.unwrap_err()
    raise failure.to_exception() from failure.error


# ═══════════════════════════════════════════════════════════════════════════════
# Async Execution
# ═══════════════════════════════════════════════════════════════════════════════


async def arun(
    operation: Callable[[], Awaitable[T] | T],
    policy: RetryPolicy = DEFAULT_POLICY,
    *,
    token: CancelToken | None = None,
    on_retry: OnRetry | None = None,
    classifier: Classifier = is_retryable,
    rng: random.Random | None = None,
) -> Result[T, RetryFailure]:
    """Async twin of ``run``.

    Awaits the operation's result when it is awaitable. Waits suspend only
    the current task. Cancelling the task itself (asyncio.CancelledError)
    propagates instead of becoming a CANCELLED result.
    """
    rng = rng or random.Random()

    attempt = 0
    while True:
        try:
            value = operation()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            logger.debug(f"Attempt {attempt + 1}/{policy.max_attempts} failed: {e!r}")
            if (failure := _settle(e, attempt, policy, classifier)) is not None:
                return Err(failure)
            wait = compute_wait(attempt, policy, rng)
            logger.debug(f"Retry {attempt + 1}/{policy.max_attempts - 1} after {wait:.3f}s")
            _notify(on_retry, e, wait)
            if token is None:
                await asyncio.sleep(wait)
            elif await token.wait_async(wait):
                return Err(_cancelled(e, attempt + 1, token.cause))
            await checkpoint()
            attempt += 1
        else:
            return Ok(value)  # type: ignore[arg-type]


async def acall(
    operation: Callable[[], Awaitable[T] | T],
    policy: RetryPolicy = DEFAULT_POLICY,
    *,
    token: CancelToken | None = None,
    on_retry: OnRetry | None = None,
    classifier: Classifier = is_retryable,
    rng: random.Random | None = None,
) -> T:
    """Async twin of ``call``."""
    result = await arun(operation, policy, token=token, on_retry=on_retry, classifier=classifier, rng=rng)
    if result.is_ok():
        return result.unwrap()
    failure = result.unwrap_err()
    raise failure.to_exception() from failure.error


# ═══════════════════════════════════════════════════════════════════════════════
# Reusable Binding
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Retrier:
    """Policy, classifier and callback bound once, applied to many operations.

    Holds no per-run state, so one instance can serve concurrent workers.

    Example:
        >>> retrier = Retrier(RetryPolicy(max_attempts=4, initial_wait=0.05, max_wait=1.0))
        >>> rows = retrier.call(lambda: db.fetch_orders(customer_id))
        >>>
        >>> @retrier.wrap
        ... async def fetch(url: str) -> bytes: ...
    """

    policy: RetryPolicy = DEFAULT_POLICY
    classifier: Classifier = is_retryable
    on_retry: OnRetry | None = None

    def run(self, operation: Callable[[], T], *, token: CancelToken | None = None) -> Result[T, RetryFailure]:
        return run(operation, self.policy, token=token, on_retry=self.on_retry, classifier=self.classifier)

    def call(self, operation: Callable[[], T], *, token: CancelToken | None = None) -> T:
        return call(operation, self.policy, token=token, on_retry=self.on_retry, classifier=self.classifier)

    async def arun(
        self, operation: Callable[[], Awaitable[T] | T], *, token: CancelToken | None = None,
    ) -> Result[T, RetryFailure]:
        return await arun(operation, self.policy, token=token, on_retry=self.on_retry, classifier=self.classifier)

    async def acall(self, operation: Callable[[], Awaitable[T] | T], *, token: CancelToken | None = None) -> T:
        return await acall(operation, self.policy, token=token, on_retry=self.on_retry, classifier=self.classifier)

    def wrap(self, func: Callable[P, T]) -> Callable[P, T]:
        """Decorate a sync or async function so each call is retried.

        The wrapped function raises RetryError subclasses on terminal failure.
        """
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
                return await self.acall(lambda: func(*args, **kwargs))  # type: ignore[arg-type,return-value]
            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return self.call(lambda: func(*args, **kwargs))
        return wrapper


def retry(
    policy: RetryPolicy | int | None = None,
    *,
    classifier: Classifier = is_retryable,
    on_retry: OnRetry | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator factory retrying every call of the decorated function.

    Args:
        policy: RetryPolicy, or an int shorthand for ``max_attempts`` with
            default backoff. None uses ``DEFAULT_POLICY``.

    Example:
        >>> @retry(RetryPolicy(max_attempts=5, initial_wait=0.1, max_wait=2.0))
        ... def load_config() -> dict: ...
        >>>
        >>> @retry(3)
        ... async def ping(host: str) -> float: ...
    """
    match policy:
        case None: resolved = DEFAULT_POLICY
        case int(): resolved = RetryPolicy(max_attempts=policy)
        case _: resolved = policy
    return Retrier(resolved, classifier, on_retry).wrap
