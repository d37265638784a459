"""
Rate limiting for the authentication endpoints (brute-force protection).

In-memory sliding window keyed by client IP. Only paths under the
configured prefixes are limited; dashboard reads are not.
"""
import time
import logging
from collections import defaultdict
from typing import Dict, Iterable, Tuple
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pharmadash.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """In-memory rate limiter with sliding window."""

    def __init__(self, requests: int = 20, window: int = 60):
        """
        Args:
            requests: Maximum requests allowed in window
            window: Time window in seconds
        """
        self.requests = requests
        self.window = window
        # Dict[client_id, List[timestamp]]
        self.clients: Dict[str, list] = defaultdict(list)
        self.last_cleanup = time.time()

    def is_allowed(self, client_id: str, now: float | None = None) -> Tuple[bool, int]:
        """
        Check if client is allowed to make request.

        Returns:
            (allowed: bool, remaining: int)
        """
        now = time.time() if now is None else now

        if now - self.last_cleanup > 300:
            self._cleanup(now)
            self.last_cleanup = now

        cutoff = now - self.window
        timestamps = [ts for ts in self.clients[client_id] if ts > cutoff]
        self.clients[client_id] = timestamps

        if len(timestamps) < self.requests:
            timestamps.append(now)
            return True, self.requests - len(timestamps)
        return False, 0

    def _cleanup(self, now: float):
        """Remove expired entries."""
        cutoff = now - self.window
        for client_id in list(self.clients.keys()):
            timestamps = [ts for ts in self.clients[client_id] if ts > cutoff]
            if timestamps:
                self.clients[client_id] = timestamps
            else:
                del self.clients[client_id]

        logger.debug(f"Rate limiter cleanup: {len(self.clients)} active clients")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply rate limiting to requests under the given path prefixes."""

    def __init__(
        self,
        app,
        prefixes: Iterable[str] = ("/auth",),
        requests: int | None = None,
        window: int | None = None,
    ):
        super().__init__(app)
        self.prefixes = tuple(prefixes)
        self.limiter = RateLimiter(
            requests=requests or settings.RATE_LIMIT_REQUESTS,
            window=window or settings.RATE_LIMIT_WINDOW_SECONDS,
        )

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.prefixes):
            return await call_next(request)

        client_id = f"ip:{request.client.host if request.client else 'unknown'}"
        allowed, remaining = self.limiter.is_allowed(client_id)

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for {client_id} on {request.method} {request.url.path}"
            )
            # Exceptions raised here bypass FastAPI's handlers, so respond directly
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "detail": f"Rate limit exceeded. Try again in {self.limiter.window} seconds."
                },
                headers={
                    "Retry-After": str(self.limiter.window),
                    "X-RateLimit-Limit": str(self.limiter.requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
