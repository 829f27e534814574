"""Exponential backoff retry for arbitrary checks.

Readiness probes poll at a fixed interval (see ``container_deps.container.readiness``).
This module is for user-supplied checks whose cost is unknown, so the delay
between attempts grows exponentially up to a cap.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from typing import TypeVar

from .logging import logger

T = TypeVar("T")

DEFAULT_INITIAL_INTERVAL = 0.5
DEFAULT_MULTIPLIER = 1.5
DEFAULT_RANDOMIZATION_FACTOR = 0.5
DEFAULT_MAX_INTERVAL = 60.0
DEFAULT_MAX_WAIT = 60.0


class ExponentialBackoff:
    """Backoff state for a single retry loop.

    Each call to ``next_interval`` returns the current interval, randomized by
    ``randomization_factor`` (0.5 means +/-50%), and then multiplies the
    current interval by ``multiplier``, never exceeding ``max_interval``.

    Args:
        initial_interval: First delay in seconds.
        multiplier: Growth factor applied after each delay.
        randomization_factor: Jitter applied to each delay, in [0, 1].
        max_interval: Cap for the (non-randomized) delay in seconds.
        max_elapsed_time: Total time budget in seconds.
    """

    def __init__(
        self,
        *,
        initial_interval: float = DEFAULT_INITIAL_INTERVAL,
        multiplier: float = DEFAULT_MULTIPLIER,
        randomization_factor: float = DEFAULT_RANDOMIZATION_FACTOR,
        max_interval: float = DEFAULT_MAX_INTERVAL,
        max_elapsed_time: float = DEFAULT_MAX_WAIT,
    ) -> None:
        if not 0 <= randomization_factor <= 1:
            raise ValueError(f"randomization_factor must be in [0, 1], got {randomization_factor}")
        if multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {multiplier}")

        self.initial_interval = initial_interval
        self.multiplier = multiplier
        self.randomization_factor = randomization_factor
        self.max_interval = max_interval
        self.max_elapsed_time = max_elapsed_time
        self.reset()

    def reset(self) -> None:
        """Restart the backoff from the initial interval and reset the clock."""
        self.current_interval = min(self.initial_interval, self.max_interval)
        self.start_time = time.monotonic()

    @property
    def elapsed(self) -> float:
        """Seconds since the last reset."""
        return time.monotonic() - self.start_time

    @property
    def expired(self) -> bool:
        """Whether the time budget has been used up."""
        return self.elapsed >= self.max_elapsed_time

    def next_interval(self) -> float:
        """Return the next delay (never past the remaining budget) and grow the interval."""
        delta = self.randomization_factor * self.current_interval
        interval = random.uniform(self.current_interval - delta, self.current_interval + delta)

        if self.current_interval >= self.max_interval / self.multiplier:
            self.current_interval = self.max_interval
        else:
            self.current_interval *= self.multiplier

        remaining = self.max_elapsed_time - self.elapsed
        return max(0.0, min(interval, remaining))


def wait_with_backoff(
    check: Callable[[], T],
    *,
    max_interval: float | None = DEFAULT_MAX_INTERVAL,
    max_wait: float | None = None,
    initial_interval: float = DEFAULT_INITIAL_INTERVAL,
    multiplier: float = DEFAULT_MULTIPLIER,
    randomization_factor: float = DEFAULT_RANDOMIZATION_FACTOR,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Call ``check`` until it stops raising, sleeping with exponential backoff in between.

    Args:
        check: Callable that raises while the awaited condition does not hold.
        max_interval: Cap for the delay between attempts in seconds (None or 0 uses 60s).
        max_wait: Total time budget in seconds (None or 0 uses 60s).
        initial_interval: First delay in seconds.
        multiplier: Growth factor applied after each delay.
        randomization_factor: Jitter applied to each delay, in [0, 1].
        retry_on: Exception types that mean "not yet"; anything else propagates immediately.

    Returns:
        Whatever ``check`` returned on its first successful call.

    Raises:
        Exception: The last exception raised by ``check`` once the time budget is used up.

    Example:
        >>> wait_with_backoff(lambda: redis_client.ping(), max_interval=2, max_wait=30)
    """
    bo = ExponentialBackoff(
        initial_interval=initial_interval,
        multiplier=multiplier,
        randomization_factor=randomization_factor,
        max_interval=max_interval or DEFAULT_MAX_INTERVAL,
        max_elapsed_time=max_wait or DEFAULT_MAX_WAIT,
    )

    attempt = 0
    while True:
        attempt += 1
        try:
            return check()
        except retry_on as e:
            if bo.expired:
                logger.debug(f"Giving up after {attempt} attempts ({bo.elapsed:.1f}s): {e}")
                raise
            delay = bo.next_interval()
            logger.debug(f"Attempt {attempt} failed ({e}), retrying in {delay:.2f}s")
            time.sleep(delay)


__all__ = [
    "ExponentialBackoff",
    "wait_with_backoff",
]
