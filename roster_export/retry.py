"""Bounded retry policy for rate-limited destination writes."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger("roster_export.retry")

BACKOFF_CHOICES = ("fixed", "exponential")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a rate-limited batch is attempted and how long to wait.

    ``max_attempts`` counts every write attempt, including the first one.
    There is no wait after the final failed attempt, so 5 attempts sleep 4
    times before the batch is given up.
    ``sleep`` is injectable so tests can run with a zero-delay clock.
    """

    max_attempts: int = 5
    delay_seconds: float = 5.0
    backoff: str = "fixed"
    max_delay_seconds: float = 60.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        if self.backoff not in BACKOFF_CHOICES:
            raise ValueError(f"backoff must be one of {BACKOFF_CHOICES}")

    def delay_for(self, attempt: int) -> float:
        """Delay before the retry that follows failed attempt number ``attempt`` (0-based)."""
        if self.backoff == "exponential":
            return min(self.delay_seconds * (2 ** attempt), self.max_delay_seconds)
        return self.delay_seconds

    def wait(self, attempt: int) -> None:
        delay = self.delay_for(attempt)
        logger.warning(
            "Rate limited, sleeping %.1fs (attempt %d/%d)",
            delay, attempt + 1, self.max_attempts,
            extra={"attempt": attempt + 1},
        )
        self.sleep(delay)
