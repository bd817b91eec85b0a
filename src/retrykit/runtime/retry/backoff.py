"""Backoff calculation for retry waits.

Delay = clamp(initial * growth^attempt, max) ± jitter

Clamping happens before jitter, so the random spread is bounded by the
ceiling. Jitter is symmetric around the clamped value: it de-synchronizes
concurrent retriers without inflating the average wait.

Attempt numbers are 0-indexed: attempt 0 is the wait after the first failure.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .policy import RetryPolicy


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation."""

    def delay(self, attempt: int) -> float:
        """Delay in seconds before the retry following 0-indexed ``attempt``."""
        ...


def exponential_wait(
    attempt: int,
    initial: float,
    maximum: float,
    growth: float,
    jitter: float,
    rng: random.Random | None = None,
) -> float:
    """Exponential, clamped, symmetrically jittered wait in seconds. Never negative.

    With ``jitter == 0`` no random value is drawn and the result is exactly
    ``min(initial * growth ** attempt, maximum)``.
    """
    if attempt < 0:
        raise ValueError(f"attempt must be >= 0, got {attempt}")
    try:
        raw = initial * growth ** attempt
    except OverflowError:
        raw = float("inf") if initial else 0.0  # saturate: large attempts land on the ceiling
    capped = min(raw, maximum)
    if not jitter:
        return max(capped, 0.0)
    u = (rng or random.Random()).random() - 0.5  # [-0.5, 0.5)
    return max(capped + u * jitter * capped, 0.0)


def compute_wait(attempt: int, policy: RetryPolicy, rng: random.Random | None = None) -> float:
    """Wait before the attempt following 0-indexed failed ``attempt``.

    Args:
        attempt: 0 for the wait after the first failure
        policy: Source of initial/max wait, growth factor and jitter fraction
        rng: Jitter source. Defaults to a fresh independently seeded
            generator so concurrent callers never share state.

    Returns:
        Wait in seconds, >= 0
    """
    return exponential_wait(
        attempt, policy.initial_wait, policy.max_wait,
        policy.growth_factor, policy.jitter_fraction, rng,
    )


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Standalone exponential backoff strategy.

    Same formula as ``compute_wait`` for callers who want a Backoff object
    (e.g. for their own loops) instead of a full RetryPolicy.

    Attributes:
        base: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay cap in seconds (default: 30.0)
        multiplier: Exponential growth factor (default: 2.0)
        jitter: Fraction of the delay randomized symmetrically (default: 0.1)
        rng: Owned generator; each instance seeds its own
    """

    base: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: float = 0.1
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        return exponential_wait(attempt, self.base, self.max_delay, self.multiplier, self.jitter, self.rng)
