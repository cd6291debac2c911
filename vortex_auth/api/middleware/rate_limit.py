"""
Rate Limiting Middleware

Per-client sliding window held in process memory. Replicas do not share
state; each process enforces its own bound.
"""

import asyncio
import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Deque, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from vortex_auth.api.responses import internal_error_response

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again later."
SWEEP_INTERVAL_SECONDS = 60

# First present header wins, value used verbatim
CLIENT_ADDRESS_HEADERS = ("X-Forwarded-For", "X-Real-IP", "CF-Connecting-IP")


@dataclass
class RateLimitResult:
    """Rate limit check result."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: float  # epoch seconds


def format_reset(reset_at: float) -> str:
    """RFC 3339, UTC"""
    moment = datetime.fromtimestamp(reset_at, tz=timezone.utc).replace(microsecond=0)
    return moment.isoformat().replace("+00:00", "Z")


def client_address(request: Request) -> str:
    for header in CLIENT_ADDRESS_HEADERS:
        value = request.headers.get(header)
        if value:
            return value

    if request.client:
        return request.client.host

    return "unknown"


class SlidingWindowRateLimiter:
    """
    Sliding window rate limiter.

    Tracks exact request timestamps per client address. One lock covers
    eviction, the count check and the append, so concurrent requests can
    never push a client past the burst.
    """

    def __init__(
        self,
        window_seconds: float,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.window_seconds = window_seconds
        self.burst = burst
        self.clock = clock
        self.wall_clock = wall_clock
        self.windows: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def _evict(self, window: Deque[float], now: float) -> None:
        window_start = now - self.window_seconds
        while window and window[0] <= window_start:
            window.popleft()

    def _reset_at(self, window: Deque[float], now: float) -> float:
        oldest = window[0] if window else now
        return self.wall_clock() + (oldest + self.window_seconds - now)

    def check(self, key: str) -> RateLimitResult:
        with self._lock:
            now = self.clock()
            window = self.windows.setdefault(key, deque())
            self._evict(window, now)

            if len(window) >= self.burst:
                return RateLimitResult(
                    allowed=False,
                    limit=self.burst,
                    remaining=0,
                    reset_at=self._reset_at(window, now),
                )

            window.append(now)
            return RateLimitResult(
                allowed=True,
                limit=self.burst,
                remaining=self.burst - len(window),
                reset_at=self._reset_at(window, now),
            )

    def sweep(self) -> int:
        """Evict stale timestamps everywhere and drop empty clients. Returns clients dropped"""
        with self._lock:
            now = self.clock()
            empty = []
            for key, window in self.windows.items():
                self._evict(window, now)
                if not window:
                    empty.append(key)
            for key in empty:
                del self.windows[key]
        return len(empty)


async def run_sweeper(
    limiter: SlidingWindowRateLimiter, interval: float = SWEEP_INTERVAL_SECONDS
) -> None:
    """Background task: sweep the limiter table until cancelled"""
    while True:
        await asyncio.sleep(interval)
        dropped = limiter.sweep()
        if dropped:
            logger.debug(f"Rate limiter sweep dropped {dropped} idle clients")


def rate_limit_headers(result: RateLimitResult) -> Dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": format_reset(result.reset_at),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.

    Rejects with 429 once a client address has used its burst inside the
    window; every response carries the X-RateLimit-* headers.
    """

    def __init__(self, app: ASGIApp, limiter: SlidingWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        address = client_address(request)
        result = self.limiter.check(address)

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {address} on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"success": False, "error": RATE_LIMITED_MESSAGE},
                headers=rate_limit_headers(result),
            )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error on {request.url.path}")
            response = internal_error_response()
        response.headers.update(rate_limit_headers(result))
        return response
