import time
import logging
from typing import Any, Callable, Optional

from flask import current_app

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30


class DashboardCache:
    """
    Single-slot time-bounded cache for the dashboard payload.

    ``clock`` returns seconds as a float and is injected so tests can move time
    forward without sleeping. Entries are served only while their age is
    strictly below ``ttl_seconds``.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._data: Optional[Any] = None
        self._stored_at: Optional[float] = None
        self.hits = 0
        self.misses = 0

    def is_valid(self) -> bool:
        if self._stored_at is None:
            return False
        return (self.clock() - self._stored_at) < self.ttl_seconds

    def get(self) -> Optional[Any]:
        if self.is_valid():
            self.hits += 1
            return self._data
        self.misses += 1
        return None

    def set(self, data: Any) -> None:
        self._data = data
        self._stored_at = self.clock()

    def invalidate(self) -> None:
        if self._stored_at is not None:
            logger.debug("dashboard cache invalidated")
        self._data = None
        self._stored_at = None


def init_app(app, clock: Callable[[], float] = time.monotonic) -> DashboardCache:
    cache = DashboardCache(
        ttl_seconds=app.config.get("DASHBOARD_CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS),
        clock=clock,
    )
    app.extensions["dashboard_cache"] = cache
    return cache


def get_cache() -> DashboardCache:
    return current_app.extensions["dashboard_cache"]
