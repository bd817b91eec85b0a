"""Cooperative cancellation signal shared by sync and async retry loops.

A CancelToken is set once and observed by waiters. Sync waiters block on a
threading.Event; async waiters register a callback that wakes their event
loop thread-safely, so one token can be cancelled from any thread.

Example:
    >>> token = CancelToken(timeout=5.0)
    >>> result = run(fetch, policy, token=token)
    >>> # elsewhere, e.g. a shutdown handler:
    >>> token.cancel("shutting down")
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Callable

from retrykit.foundation.errors import CancelledError, DeadlineExceeded

Callback = Callable[["CancelToken"], None]

logger = logging.getLogger("retrykit.cancel")


class CancelToken:
    """Thread-safe, set-once cancellation signal with optional deadline.

    The first cancellation wins: later ``cancel()`` calls are no-ops and do
    not replace the recorded cause. A deadline is checked lazily against
    the monotonic clock whenever the token is queried or waited on.

    Args:
        timeout: Seconds from construction after which the token counts
            as cancelled with a DeadlineExceeded cause
    """

    __slots__ = ("_event", "_lock", "_cause", "_callbacks", "_deadline", "_timeout")

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout}")
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._cause: CancelledError | None = None
        self._callbacks: list[Callback] = []
        self._timeout = timeout
        self._deadline = None if timeout is None else time.monotonic() + timeout

    # ─── State ───────────────────────────────────────────────────────

    @property
    def cancelled(self) -> bool:
        """Whether the token has fired (explicitly or by deadline)."""
        self._check_deadline()
        return self._event.is_set()

    @property
    def cause(self) -> CancelledError | None:
        self._check_deadline()
        return self._cause

    @property
    def remaining(self) -> float | None:
        """Seconds until the deadline, None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self, reason: str | CancelledError = "cancelled") -> bool:
        """Fire the token. Returns False if it had already fired."""
        cause = reason if isinstance(reason, CancelledError) else CancelledError(reason)
        with self._lock:
            if self._event.is_set():
                return False
            self._cause = cause
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            try:
                cb(self)
            except Exception:
                logger.warning("cancel callback raised; continuing", exc_info=True)
        return True

    def raise_if_cancelled(self) -> None:
        """Raise the recorded cause if the token has fired."""
        if self.cancelled:
            raise self._cause  # type: ignore[misc]

    # ─── Waiting ─────────────────────────────────────────────────────

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to ``timeout`` seconds. True if the token fired first."""
        end = None if timeout is None else time.monotonic() + timeout
        while not self.cancelled:
            if self._event.wait(self._bounded(_until(end))):
                return True
            if end is not None and time.monotonic() >= end:
                return self.cancelled
        return True

    async def wait_async(self, timeout: float | None = None) -> bool:
        """Async twin of ``wait``; suspends only the calling task."""
        if self.cancelled:
            return True
        end = None if timeout is None else time.monotonic() + timeout
        loop = asyncio.get_running_loop()
        fired = loop.create_future()

        def _wake(_: CancelToken) -> None:
            loop.call_soon_threadsafe(lambda: fired.done() or fired.set_result(True))

        self.add_callback(_wake)
        try:
            while not self.cancelled:
                try:
                    await asyncio.wait_for(asyncio.shield(fired), self._bounded(_until(end)))
                    return True
                except TimeoutError:
                    if end is not None and time.monotonic() >= end:
                        return self.cancelled
            return True
        finally:
            self.remove_callback(_wake)
            fired.cancel()

    # ─── Callbacks & Linking ─────────────────────────────────────────

    def add_callback(self, cb: Callback) -> None:
        """Run ``cb(token)`` on cancellation, immediately if already fired."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(cb)
                return
        cb(self)

    def remove_callback(self, cb: Callback) -> None:
        with self._lock:
            try:
                self._callbacks.remove(cb)
            except ValueError:
                pass

    def child(self, timeout: float | None = None) -> CancelToken:
        """New token that fires with this one, optionally with a tighter deadline.

        The link is dropped from this token once the child fires.
        """
        token = CancelToken(self._bounded(timeout))

        def _propagate(parent: CancelToken) -> None:
            token.cancel(parent.cause or "parent cancelled")

        self.add_callback(_propagate)
        token.add_callback(lambda _: self.remove_callback(_propagate))
        return token

    # ─── Internals ───────────────────────────────────────────────────

    def _bounded(self, timeout: float | None) -> float | None:
        remaining = self.remaining
        if remaining is None:
            return timeout
        return remaining if timeout is None else min(timeout, remaining)

    def _check_deadline(self) -> None:
        if self._deadline is not None and not self._event.is_set() and time.monotonic() >= self._deadline:
            self.cancel(DeadlineExceeded(self._timeout))  # type: ignore[arg-type]

    def __repr__(self) -> str:
        state = f"cancelled={self._cause!r}" if self._event.is_set() else "active"
        return f"CancelToken({state})"


def _until(end: float | None) -> float | None:
    return None if end is None else max(0.0, end - time.monotonic())
