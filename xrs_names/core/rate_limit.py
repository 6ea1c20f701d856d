"""Sliding-window admission control keyed by client IP."""

from __future__ import annotations

import math
import time
from collections import deque
from typing import Callable, Deque, Dict, Tuple

from fastapi import HTTPException, Request, status

GENERAL_LIMIT_MESSAGE = "Too many requests, please try again later"
REGISTER_LIMIT_MESSAGE = "Too many registration attempts, please try again later"


class SlidingWindowLimiter:
    """Allow at most ``max_requests`` per key within any ``window_seconds`` span.

    Timestamps older than the window are pruned when the key is next hit.
    State is per-process; run a single worker or put a shared limiter in front
    when scaling out.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}

    def hit(self, key: str) -> Tuple[bool, float]:
        """Record a request for ``key``; return ``(allowed, retry_after_seconds)``."""

        now = self._clock()
        window = self._hits.setdefault(key, deque())
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()

        if len(window) >= self.max_requests:
            return False, max(0.0, window[0] + self.window_seconds - now)

        window.append(now)
        return True, 0.0

    def reset(self) -> None:
        self._hits.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def retry_after_header(seconds: float) -> Dict[str, str]:
    return {"Retry-After": str(max(1, math.ceil(seconds)))}


def limit_registrations(request: Request) -> None:
    """Dependency guarding the registration endpoint."""

    limiter = getattr(request.app.state, "register_limiter", None)
    if limiter is None:
        return
    allowed, retry_after = limiter.hit(client_key(request))
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=REGISTER_LIMIT_MESSAGE,
            headers=retry_after_header(retry_after),
        )


__all__ = [
    "GENERAL_LIMIT_MESSAGE",
    "REGISTER_LIMIT_MESSAGE",
    "SlidingWindowLimiter",
    "client_key",
    "limit_registrations",
    "retry_after_header",
]
