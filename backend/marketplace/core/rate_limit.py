"""
Rate limiting for sensitive endpoints (login, password reset)
Uses in-memory storage with sliding window algorithm
"""
import time
from typing import Dict, Tuple
from collections import defaultdict

from fastapi import Request

from marketplace.core.config import settings
from marketplace.core.errors import RateLimitExceededError


class RateLimiter:
    """
    In-memory rate limiter using sliding window algorithm.

    For production with multiple instances, consider using Redis.
    """

    def __init__(self, cleanup_interval: int = 60):
        # {identifier: [(timestamp, count), ...]}
        self._requests: Dict[str, list] = defaultdict(list)
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval

    def _cleanup_old_entries(self, window_seconds: int = 60):
        """Remove entries older than the largest window we care about"""
        now = time.time()

        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds * 2

        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [
                (ts, count) for ts, count in self._requests[identifier]
                if ts > cutoff
            ]
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now

    def is_allowed(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: int = 60
    ) -> Tuple[bool, int, int]:
        """
        Check if a request is allowed under the rate limit.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        self._cleanup_old_entries(window_seconds)

        now = time.time()
        window_start = now - window_seconds

        requests_in_window = [
            (ts, count) for ts, count in self._requests[identifier]
            if ts > window_start
        ]
        self._requests[identifier] = requests_in_window

        total_requests = sum(count for _, count in requests_in_window)

        if total_requests >= max_requests:
            if requests_in_window:
                oldest_timestamp = min(ts for ts, _ in requests_in_window)
                retry_after = int(oldest_timestamp + window_seconds - now) + 1
            else:
                retry_after = 1

            return False, 0, retry_after

        self._requests[identifier].append((now, 1))

        remaining = max_requests - total_requests - 1
        return True, remaining, 0

    def reset(self):
        self._requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


def get_client_ip(request: Request) -> str:
    """
    Get the client IP used as the rate-limit key.

    X-Forwarded-For is client-controlled, so it is only honoured when
    TRUST_FORWARDED_FOR says a proxy in front of the app sets it.
    """
    if settings.TRUST_FORWARDED_FOR:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # Take the first IP in the chain (original client)
            return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def rate_limit(max_requests: int = None, window_seconds: int = 60):
    """
    Dependency factory for per-endpoint rate limits keyed by client IP.

    Usage:
        @router.post("/login")
        def login(_: None = Depends(rate_limit(max_requests=5))):
            pass
    """
    async def rate_limit_check(request: Request) -> None:
        limit = max_requests or settings.AUTH_RATE_LIMIT_PER_MINUTE
        identifier = f"endpoint:{request.url.path}:ip:{get_client_ip(request)}"

        is_allowed, remaining, retry_after = rate_limiter.is_allowed(
            identifier=identifier,
            max_requests=limit,
            window_seconds=window_seconds
        )

        if not is_allowed:
            raise RateLimitExceededError(
                f"Rate limit exceeded for this endpoint. Try again in {retry_after} seconds.",
                limit=limit,
                retry_after=retry_after
            )

    return rate_limit_check
