"""Capped exponential backoff with full jitter."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional

from tenacity.wait import wait_base

if TYPE_CHECKING:
    from tenacity import RetryCallState

# Larger exponents only saturate at max_delay
_MAX_EXPONENT = 62


def compute_backoff(base_delay: float, max_delay: float, attempt_index: int) -> float:
    """Backoff ceiling before the attempt following attempt_index.

    Args:
        base_delay: Base delay in seconds
        max_delay: Cap in seconds
        attempt_index: 0-based index of the attempt that just failed

    Returns:
        min(base_delay * 2**attempt_index, max_delay)
    """
    exponent = min(max(attempt_index, 0), _MAX_EXPONENT)
    return min(base_delay * (2**exponent), max_delay)


def full_jitter(backoff: float, rng: random.Random) -> float:
    """Draw a wait uniformly from [0, backoff); zero backoff yields zero."""
    if backoff <= 0:
        return 0.0
    return rng.random() * backoff


class wait_full_jitter(wait_base):
    """Tenacity wait strategy: capped exponential backoff with full jitter.

    Tenacity numbers attempts from 1; the backoff exponent is the 0-based
    index of the attempt that just failed. Tenacity evaluates the wait before
    the stop condition, so with an attempt budget the final attempt yields 0
    without drawing from the random source.
    """

    def __init__(
        self,
        base_delay: float,
        max_delay: float,
        rng: random.Random,
        attempt_budget: Optional[int] = None,
    ) -> None:
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.rng = rng
        self.attempt_budget = attempt_budget

    def __call__(self, retry_state: RetryCallState) -> float:
        if self.attempt_budget is not None and retry_state.attempt_number >= self.attempt_budget:
            return 0.0
        backoff = compute_backoff(self.base_delay, self.max_delay, retry_state.attempt_number - 1)
        return full_jitter(backoff, self.rng)
