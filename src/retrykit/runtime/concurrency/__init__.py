"""Concurrency primitives for the retry runtime.

Key Components:
    - CancelToken: cooperative, thread-safe cancellation signal with deadlines
    - checkpoint: yield to the event loop so pending task cancellation lands

Example:
    >>> from retrykit.runtime.concurrency import CancelToken
    >>> token = CancelToken(timeout=30.0)
    >>> token.wait(0.5)  # False unless cancelled within half a second
    False
"""

from __future__ import annotations

import asyncio

from .cancel import CancelToken


async def checkpoint() -> None:
    """Cooperative cancellation checkpoint.

    Yields control to the event loop, allowing pending cancellations
    to be processed.
    """
    await asyncio.sleep(0)


__all__ = ["CancelToken", "checkpoint"]
