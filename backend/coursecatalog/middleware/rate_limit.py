"""
Course Catalog Backend — Rate Limiting Middleware
==================================================

What:  Per-IP sliding window rate limiter.
Why:   The catalog is public and unauthenticated; scrapers walking every
       course number should not starve the connection pool.
How:   SlidingWindowLimiter keeps recent request timestamps per client IP;
       RateLimitMiddleware consults it before passing the request on.

Algorithm: Sliding Window Log
    1. Drop timestamps older than the window
    2. If the remaining count >= limit, reject with 429
    3. Otherwise record the current timestamp and allow

    State is in-process, so each uvicorn worker enforces its own limit.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from coursecatalog.config import settings
from coursecatalog.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    """
    Sliding window request log keyed by client identifier.

    check() returns None when the request is allowed, or the number of
    seconds until the oldest request in the window expires.
    """

    CLEANUP_EVERY = 1000

    def __init__(self, max_requests: int, window_seconds: int):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._checks = 0

    def check(self, client: str, now: Optional[float] = None) -> Optional[int]:
        now = time.time() if now is None else now
        window_start = now - self.window_seconds

        recent = [ts for ts in self._requests[client] if ts > window_start]
        self._requests[client] = recent

        if len(recent) >= self.max_requests:
            return int(recent[0] + self.window_seconds - now) + 1

        recent.append(now)

        self._checks += 1
        if self._checks % self.CLEANUP_EVERY == 0:
            self._cleanup_inactive(window_start)
        return None

    def _cleanup_inactive(self, window_start: float) -> None:
        """Forget clients with no requests inside the current window."""
        inactive = [
            client for client, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for client in inactive:
            del self._requests[client]

        if inactive:
            logger.debug("Cleaned up %d inactive rate limit entries", len(inactive))

    def __len__(self) -> int:
        return len(self._requests)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects clients that exceed settings.rate_limit_requests within
    settings.rate_limit_window seconds.

    Health checks and API docs are never limited.

    Middleware runs outside FastAPI's exception handlers, so the 429 body is
    rendered here from a RateLimitExceededError rather than raised.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, max_requests: Optional[int] = None, window_seconds: Optional[int] = None):
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(
            max_requests=max_requests or settings.rate_limit_requests,
            window_seconds=window_seconds or settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        # Behind a proxy this is the proxy's address unless uvicorn runs
        # with --proxy-headers
        client_ip = request.client.host if request.client else "unknown"

        retry_after = self.limiter.check(client_ip)
        if retry_after is not None:
            exc = RateLimitExceededError(retry_after=retry_after)
            logger.warning(
                "Rate limit exceeded for IP %s (%d requests in %ds window)",
                client_ip,
                self.limiter.max_requests,
                self.limiter.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        return await call_next(request)
