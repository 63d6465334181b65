# -----------------------------------------------------------------------------
# careergenie/security/rate_guard.py — Prompt size cap and per-IP sliding-window limiter
# -----------------------------------------------------------------------------

import asyncio
import time
from typing import Callable

MAX_PROMPT_LENGTH = 20_000
RATE_LIMIT_REQUESTS = 15
RATE_LIMIT_WINDOW_SEC = 60


class RateLimitExceeded(Exception):
    pass


class RateLimiter:
    def __init__(
        self,
        max_requests: int = RATE_LIMIT_REQUESTS,
        window_sec: float = RATE_LIMIT_WINDOW_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._clock = clock
        self._store: dict[str, list[float]] = {}
        self._last_sweep = clock()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._store)

    def _evict_stale(self, now: float) -> None:
        for key in list(self._store):
            timestamps = [t for t in self._store[key] if now - t < self.window_sec]
            if timestamps:
                self._store[key] = timestamps
            else:
                del self._store[key]
        self._last_sweep = now

    async def check(self, key: str) -> None:
        async with self._lock:
            now = self._clock()
            # Full sweep at most once per window; keys not seen since are dropped.
            if now - self._last_sweep >= self.window_sec:
                self._evict_stale(now)
            timestamps = [t for t in self._store.get(key, []) if now - t < self.window_sec]
            if len(timestamps) >= self.max_requests:
                self._store[key] = timestamps
                raise RateLimitExceeded(key)
            timestamps.append(now)
            self._store[key] = timestamps
