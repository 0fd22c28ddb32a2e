"""
In-memory fixed-window rate limiting per client address.

Every request to a limited path counts, whatever its outcome, malformed
bodies included: the check runs as middleware, before FastAPI reads the
body. Once a client exceeds ``max_requests`` inside a window it is rejected
with 429 until the window that started with its first request elapses.

Usage:
    from contact_relay.core.rate_limit import RateLimitMiddleware

    app.add_middleware(RateLimitMiddleware, paths=("/endpoint",))
"""

import logging
import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Iterable, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from contact_relay.core.settings import settings

log = logging.getLogger("uvicorn.error")


@dataclass
class RateLimitState:
    limit: int
    count: int
    reset_at: float

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)

    @property
    def exceeded(self) -> bool:
        return self.count > self.limit


class FixedWindowRateLimiter:
    """Thread-safe counter store keyed by client address."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = Lock()
        self._windows: Dict[str, Tuple[int, float]] = {}

    def now(self) -> float:
        return self._clock()

    def hit(self, key: str) -> RateLimitState:
        now = self._clock()
        with self._lock:
            count, reset_at = self._windows.get(key, (0, 0.0))
            if now >= reset_at:
                count, reset_at = 0, now + self.window_seconds
            count += 1
            self._windows[key] = (count, reset_at)
            self._prune(now)
        return RateLimitState(limit=self.max_requests, count=count, reset_at=reset_at)

    def _prune(self, now: float) -> None:
        expired = [k for k, (_, reset_at) in self._windows.items() if reset_at <= now]
        for k in expired:
            del self._windows[k]

    def reset(self) -> None:
        """Clear all counters. Intended for tests."""
        with self._lock:
            self._windows.clear()

    def stats(self) -> dict:
        with self._lock:
            return {"tracked_keys": len(self._windows), "counts": {k: c for k, (c, _) in self._windows.items()}}


limiter = FixedWindowRateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Counts requests to ``paths`` per client and rejects the excess with 429.

    ``X-RateLimit-*`` headers go on every counted response, whatever the
    handler returned.
    """

    def __init__(self, app, paths: Iterable[str]):
        super().__init__(app)
        self.paths = frozenset(paths)

    async def dispatch(self, request: Request, call_next):
        if request.url.path not in self.paths:
            return await call_next(request)

        ip = client_address(request)
        state = limiter.hit(ip)
        if state.exceeded:
            retry_after = max(1, math.ceil(state.reset_at - limiter.now()))
            if state.count == state.limit + 1:
                log.warning(f"[rate-limit] {ip} exceeded {state.limit} requests per window")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": settings.rate_limit_message},
                headers={"Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(state.limit)
        response.headers["X-RateLimit-Remaining"] = str(state.remaining)
        return response
