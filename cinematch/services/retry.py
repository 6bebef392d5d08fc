"""Retry policy for outbound HTTP calls."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

import requests

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff.

    Attempt ``n`` (0-based) that fails waits ``base_delay * multiplier ** n``
    seconds before the next one. After ``max_attempts`` failures the last
    exception is re-raised. ``sleep`` is injectable so tests can use a fake
    clock.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        return self.base_delay * (self.multiplier ** attempt)

    def call(self, fn: Callable[[], T], description: str = "request") -> T:
        attempts = max(1, self.max_attempts)
        for attempt in range(attempts):
            try:
                return fn()
            except requests.RequestException as exc:
                if attempt == attempts - 1:
                    raise
                wait = self.delay(attempt)
                logger.debug(
                    "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                    description, attempt + 1, attempts, exc, wait,
                )
                self.sleep(wait)
        raise AssertionError("unreachable")
