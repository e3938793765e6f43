"""Spacing of outbound calls to the remote source.

The interval is measured from the *start* of the previous call. The lock is
held for the whole call, so two callers (two batches in two request threads)
can never overlap or start closer together than ``min_interval``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from threading import Lock

logger = logging.getLogger(__name__)

MIN_INTERVAL_FLOOR = 1.0


class RateLimiter:
    def __init__(
        self,
        min_interval: float = MIN_INTERVAL_FLOOR,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._min_interval = max(float(min_interval), MIN_INTERVAL_FLOOR)
        self._clock = clock
        self._sleep = sleep
        self._lock = Lock()
        self._last_start: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    def widen(self, min_interval: float) -> bool:
        """Raise the interval to ``min_interval`` if that is larger; never lowers it."""

        with self._lock:
            if float(min_interval) <= self._min_interval:
                return False
            self._min_interval = float(min_interval)
            return True

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Block until a call may start, then hold the slot until it finishes."""

        with self._lock:
            if self._last_start is not None:
                wait = self._last_start + self._min_interval - self._clock()
                if wait > 0:
                    logger.debug("Rate limit: sleeping %.3fs", wait)
                    self._sleep(wait)
            self._last_start = self._clock()
            yield


_REGISTRY: dict[str, RateLimiter] = {}
_REGISTRY_LOCK = Lock()


def shared_rate_limiter(key: str, min_interval: float = MIN_INTERVAL_FLOOR) -> RateLimiter:
    """Process-wide limiter per remote endpoint.

    Every caller gets the same instance. The interval is the largest any
    caller asked for, so a later, stricter setting is never ignored.
    """

    with _REGISTRY_LOCK:
        limiter = _REGISTRY.get(key)
        if limiter is None:
            limiter = RateLimiter(min_interval=min_interval)
            _REGISTRY[key] = limiter
        elif limiter.widen(min_interval):
            logger.info("Rate limit for %s raised to %.3fs", key, limiter.min_interval)
        elif float(min_interval) < limiter.min_interval:
            logger.debug(
                "Rate limit for %s stays at %.3fs (requested %.3fs)", key, limiter.min_interval, float(min_interval)
            )
        return limiter
