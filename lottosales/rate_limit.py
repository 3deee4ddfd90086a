"""Request rate limiting for the public ticket verification page."""

from __future__ import annotations

import time
from collections.abc import Callable
from threading import Lock
from typing import Protocol

from flask import Flask, Request, current_app


class RateLimiter(Protocol):
    def hit(self, key: str) -> bool:
        """Count one request for `key`; return False when the key is over its limit."""
        ...


class FixedWindowRateLimiter:
    """In-process fixed-window counter keyed by client identity.

    Counters live in memory and are lost on restart; swap in a shared-store
    implementation of `RateLimiter` when running several instances.
    """

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._limit = int(limit)
        self._window = float(window_seconds)
        self._clock = clock
        self._lock = Lock()
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_prune = clock()

    def hit(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            self._prune(now)

            started, count = self._windows.get(key, (now, 0))
            if now - started >= self._window:
                started, count = now, 0

            if count >= self._limit:
                self._windows[key] = (started, count)
                return False

            self._windows[key] = (started, count + 1)
            return True

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def _prune(self, now: float) -> None:
        if now - self._last_prune < self._window:
            return
        expired = [k for k, (started, _) in self._windows.items() if now - started >= self._window]
        for k in expired:
            del self._windows[k]
        self._last_prune = now


def init_rate_limiter(app: Flask, limiter: RateLimiter | None = None) -> None:
    app.extensions["rate_limiter"] = limiter or FixedWindowRateLimiter(
        limit=int(app.config.get("VERIFY_RATE_LIMIT", 10)),
        window_seconds=float(app.config.get("VERIFY_RATE_WINDOW_SECONDS", 60)),
    )


def get_rate_limiter() -> RateLimiter:
    limiter = current_app.extensions.get("rate_limiter")
    if limiter is None:
        raise RuntimeError("Rate limiter not initialized")
    return limiter


def client_key(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop set by the proxy."""

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.remote_addr or "unknown"
