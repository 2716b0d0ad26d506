"""Minimum-interval rate limiter shared by the crawl loop and API providers."""

from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces calls at least ``min_interval`` seconds apart.

    The interval runs from the previous :meth:`wait` or :meth:`mark`,
    whichever came last. The first call to :meth:`wait` never blocks.
    Clock and sleep are injectable so callers can test pacing without
    real delays.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        name: str = "rate limit",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval = max(min_interval, 0.0)
        self.name = name
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None

    def wait(self) -> float:
        """Block until the interval has passed. Returns the seconds slept."""
        waited = 0.0
        if self._last is not None:
            elapsed = self._clock() - self._last
            if elapsed < self.min_interval:
                waited = self.min_interval - elapsed
                logger.info("%s: waiting %.1fs", self.name, waited)
                self._sleep(waited)
        self._last = self._clock()
        return waited

    def mark(self) -> None:
        """Restart the interval from now, e.g. when the paced work finishes."""
        self._last = self._clock()
