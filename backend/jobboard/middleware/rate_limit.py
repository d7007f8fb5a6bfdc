"""
Rate Limiting Middleware - fixed-window request limit per client

Each client address gets a Redis counter:

    ratelimit:{client_ip} - INCR per request, EXPIRE set on the first hit

A client that exceeds ``max_requests`` inside ``window_seconds`` receives
429 until its key expires. Every response carries X-RateLimit-Limit and
X-RateLimit-Remaining; a 429 also carries Retry-After.

Redis errors fail open: the request is served and a warning is logged.
"""

import logging
from dataclasses import dataclass
from typing import Callable

import redis.asyncio as redis
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

KEY_PREFIX = "ratelimit"
EXEMPT_PATHS = {"/health", "/metrics"}
TOO_MANY_REQUESTS = "Too many requests, please try again later."


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int = 0


class FixedWindowRateLimiter:
    """
    Redis-backed fixed-window counter.

    Attributes:
        redis: Async Redis client
        max_requests: Requests allowed per window
        window_seconds: Window length
    """

    def __init__(self, redis_client: redis.Redis, max_requests: int, window_seconds: int):
        self.redis = redis_client
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    @classmethod
    def from_url(cls, redis_url: str, max_requests: int, window_seconds: int):
        client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        return cls(client, max_requests, window_seconds)

    def _key(self, client_id: str) -> str:
        return f"{KEY_PREFIX}:{client_id}"

    async def hit(self, client_id: str) -> RateLimitResult:
        """Count one request for ``client_id`` and decide whether it may proceed."""
        key = self._key(client_id)
        count = await self.redis.incr(key)
        if count == 1:
            await self.redis.expire(key, self.window_seconds)

        if count <= self.max_requests:
            return RateLimitResult(True, self.max_requests, self.max_requests - count)

        retry_after = await self.redis.ttl(key)
        if retry_after < 0:
            # counter lost its expiry; start a fresh window
            await self.redis.expire(key, self.window_seconds)
            retry_after = self.window_seconds
        return RateLimitResult(False, self.max_requests, 0, retry_after=retry_after)

    async def close(self) -> None:
        await self.redis.close()


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients over their request limit with 429."""

    def __init__(self, app: FastAPI, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        try:
            result = await self.limiter.hit(client_address(request))
        except RedisError as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e}")
            return await call_next(request)

        if result.allowed:
            response = await call_next(request)
        else:
            logger.warning(f"Rate limit exceeded for {client_address(request)}")
            response = JSONResponse(status_code=429, content={"error": TOO_MANY_REQUESTS})
            response.headers["Retry-After"] = str(result.retry_after)

        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response
