"""Retry policy configuration.

Immutable description of an attempt budget and backoff shape. A policy is
read-only during a run and safe to share across concurrent runs: it holds
no generator or counters.

Optimizations:
- Frozen for immutability and hashability
- No validation on copy (revalidate_instances="never")
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveInt, computed_field

from .backoff import compute_wait

if TYPE_CHECKING:
    from retrykit.foundation.config import RetrykitSettings


class RetryPolicy(BaseModel):
    """Attempt budget and backoff parameters for one run.

    ``max_wait`` is expected to be >= ``initial_wait`` but this is not
    enforced: a smaller ceiling simply clamps every wait to ``max_wait``.

    Attributes:
        max_attempts: Total invocations of the operation, including the first
        initial_wait: Wait after the first failure, in seconds
        max_wait: Ceiling applied before jitter, in seconds
        growth_factor: Multiplier per attempt (1.0 = constant backoff)
        jitter_fraction: Fraction of the wait randomized around zero

    Example:
        >>> policy = RetryPolicy(max_attempts=5, initial_wait=0.1, max_wait=5.0,
        ...                      growth_factor=2.0, jitter_fraction=0.0)
        >>> [policy.wait_for(i) for i in range(3)]
        [0.1, 0.2, 0.4]
    """

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
        json_schema_extra={
            "title": "Retry Policy",
            "description": "Attempt budget and exponential backoff shape",
            "examples": [{
                "max_attempts": 3,
                "initial_wait": 0.1,
                "max_wait": 5.0,
                "growth_factor": 2.0,
                "jitter_fraction": 0.1,
            }],
        },
    )

    max_attempts: PositiveInt = 3
    initial_wait: NonNegativeFloat = 0.01
    max_wait: NonNegativeFloat = 0.01
    growth_factor: Annotated[float, Field(ge=1.0)] = 1.5
    jitter_fraction: Annotated[float, Field(ge=0.0, le=1.0)] = 0.1

    @computed_field
    @property
    def is_disabled(self) -> bool:
        """Whether the policy allows only a single attempt."""
        return self.max_attempts == 1

    @classmethod
    def from_settings(cls, settings: RetrykitSettings | None = None) -> RetryPolicy:
        """Build from environment configuration (RETRYKIT_RETRY_*)."""
        if settings is None:
            from retrykit.foundation.config import get_settings
            settings = get_settings()
        return cls.model_validate(settings.retry.model_dump())

    def is_last(self, attempt: int) -> bool:
        """Whether 0-indexed ``attempt`` is the final permitted invocation."""
        return attempt + 1 >= self.max_attempts

    def wait_for(self, attempt: int, rng: random.Random | None = None) -> float:
        """Wait after failed 0-indexed ``attempt``."""
        return compute_wait(attempt, self, rng)


DEFAULT_POLICY = RetryPolicy()

NO_RETRY = RetryPolicy(max_attempts=1, initial_wait=0.0, max_wait=0.0, jitter_fraction=0.0)
