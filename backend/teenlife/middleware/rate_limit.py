"""
TeenLife Hours Backend — Rate Limiting Middleware
===================================================

What:  Per-IP sliding window rate limiter.
How:   Keeps a list of request timestamps per (bucket, IP) in memory. Old
       timestamps are dropped on every request; once the count reaches the
       bucket's limit the request is rejected with 429 and Retry-After.

Buckets:
    general  every /api route, rate_limit_requests per rate_limit_window
    verify   POST /api/volunteer/verify, verify_rate_limit_requests per
             window. The verification code is the only credential on that
             route, so it gets a much smaller budget to stop code guessing.

Single-process only: each uvicorn worker keeps its own counters.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from teenlife.config import settings
from teenlife.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

VERIFY_PATH = "/api/volunteer/verify"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter with a stricter verify bucket.

    Limits default to the values in settings; they can be passed explicitly
    when the middleware is added (the test suite does this).
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        verify_requests: Optional[int] = None,
    ):
        super().__init__(app)
        self.requests = requests if requests is not None else settings.rate_limit_requests
        self.window = window if window is not None else settings.rate_limit_window
        self.verify_requests = (
            verify_requests
            if verify_requests is not None
            else settings.verify_rate_limit_requests
        )
        self._requests: Dict[Tuple[str, str], List[float]] = defaultdict(list)
        self._seen = 0

    def _bucket_for(self, request: Request) -> Tuple[str, int]:
        if request.method == "POST" and request.url.path == VERIFY_PATH:
            return "verify", self.verify_requests
        return "general", self.requests

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        bucket, limit = self._bucket_for(request)
        key = (bucket, client_ip)

        now = time.time()
        window_start = now - self.window

        # ── Sliding window ────────────────────────────────────────────────
        timestamps = [ts for ts in self._requests[key] if ts > window_start]
        self._requests[key] = timestamps

        if len(timestamps) >= limit:
            exc = RateLimitExceededError(retry_after=int(timestamps[0] + self.window - now) + 1)
            logger.warning(
                "Rate limit exceeded for IP %s on %s bucket: %d requests in %ds window",
                client_ip,
                bucket,
                len(timestamps),
                self.window,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        timestamps.append(now)

        self._seen += 1
        if self._seen % 1000 == 0:
            self._cleanup_inactive(window_start)

        return await call_next(request)

    def _cleanup_inactive(self, window_start: float) -> None:
        """Drop (bucket, IP) keys with no requests inside the current window."""
        inactive = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for key in inactive:
            del self._requests[key]

        if inactive:
            logger.debug("Cleaned up %d inactive rate limit entries", len(inactive))
