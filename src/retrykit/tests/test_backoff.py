"""Tests for backoff calculation.

Validates:
- Exact exponential-clamped sequence without jitter
- Non-negativity and jitter bounds
- Monotonic growth up to the ceiling
- Overflow saturation for huge attempt numbers
"""

from __future__ import annotations

import random

import pytest

from retrykit.runtime.retry import ExponentialBackoff, RetryPolicy, compute_wait, exponential_wait


def _policy(**kw: float) -> RetryPolicy:
    defaults = {"max_attempts": 5, "initial_wait": 0.1, "max_wait": 5.0, "growth_factor": 2.0, "jitter_fraction": 0.0}
    return RetryPolicy(**{**defaults, **kw})


# ═════════════════════════════════════════════════════════════════════════════
# Deterministic Curve
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("attempt", "expected"),
    [(0, 0.1), (1, 0.2), (2, 0.4), (3, 0.8), (10, 5.0)],
)
def test_growth_table_without_jitter(attempt: int, expected: float) -> None:
    assert compute_wait(attempt, _policy()) == pytest.approx(expected)


def test_matches_closed_form_without_jitter() -> None:
    policy = _policy(initial_wait=0.03, max_wait=2.0, growth_factor=1.7)
    for attempt in range(40):
        assert compute_wait(attempt, policy) == min(0.03 * 1.7 ** attempt, 2.0)


def test_monotonic_until_ceiling_then_constant() -> None:
    policy = _policy()
    waits = [compute_wait(i, policy) for i in range(20)]
    assert waits == sorted(waits)
    first_cap = waits.index(5.0)
    assert all(w == 5.0 for w in waits[first_cap:])


def test_growth_factor_one_is_constant() -> None:
    policy = _policy(initial_wait=0.25, growth_factor=1.0)
    assert {compute_wait(i, policy) for i in range(10)} == {0.25}


def test_no_random_draw_without_jitter() -> None:
    class Exploding(random.Random):
        def random(self) -> float:
            raise AssertionError("jitter source consulted")

    assert compute_wait(2, _policy(), Exploding()) == pytest.approx(0.4)


def test_max_below_initial_clamps_everything() -> None:
    policy = _policy(initial_wait=1.0, max_wait=0.5)
    assert [compute_wait(i, policy) for i in range(4)] == [0.5] * 4


# ═════════════════════════════════════════════════════════════════════════════
# Jitter
# ═════════════════════════════════════════════════════════════════════════════


def test_jitter_stays_within_symmetric_band() -> None:
    policy = _policy(jitter_fraction=0.5)
    rng = random.Random(1234)
    for attempt in range(12):
        capped = min(0.1 * 2.0 ** attempt, 5.0)
        wait = compute_wait(attempt, policy, rng)
        assert capped * 0.75 <= wait < capped * 1.25


def test_full_jitter_never_negative() -> None:
    policy = _policy(jitter_fraction=1.0)
    rng = random.Random(7)
    assert all(compute_wait(i % 8, policy, rng) >= 0.0 for i in range(500))


def test_jitter_is_symmetric_on_average() -> None:
    policy = _policy(initial_wait=1.0, max_wait=1.0, jitter_fraction=1.0)
    rng = random.Random(42)
    mean = sum(compute_wait(0, policy, rng) for _ in range(5000)) / 5000
    assert mean == pytest.approx(1.0, abs=0.03)


def test_seeded_generators_reproduce_sequence() -> None:
    policy = _policy(jitter_fraction=0.3)
    a = [compute_wait(i, policy, random.Random(99)) for i in range(6)]
    b = [compute_wait(i, policy, random.Random(99)) for i in range(6)]
    assert a == b


def test_lowest_draw_hits_lower_bound() -> None:
    class Lowest(random.Random):
        def random(self) -> float:
            return 0.0

    assert compute_wait(0, _policy(initial_wait=1.0, jitter_fraction=1.0), Lowest()) == pytest.approx(0.5)


# ═════════════════════════════════════════════════════════════════════════════
# Edge Cases
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("attempt", [1_000, 10_000, 10**9])
def test_huge_attempt_saturates_at_ceiling(attempt: int) -> None:
    assert compute_wait(attempt, _policy()) == 5.0


def test_zero_initial_wait_stays_zero_even_when_overflowing() -> None:
    policy = _policy(initial_wait=0.0)
    assert compute_wait(0, policy) == 0.0
    assert compute_wait(10**9, policy) == 0.0


def test_negative_attempt_rejected() -> None:
    with pytest.raises(ValueError):
        compute_wait(-1, _policy())


def test_exponential_backoff_strategy() -> None:
    backoff = ExponentialBackoff(base=0.5, max_delay=3.0, multiplier=3.0, jitter=0.0)
    assert [backoff.delay(i) for i in range(4)] == [0.5, 1.5, 3.0, 3.0]
    assert exponential_wait(1, 0.5, 3.0, 3.0, 0.0) == backoff.delay(1)
