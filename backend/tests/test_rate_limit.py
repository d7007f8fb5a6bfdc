"""
Tests for per-client rate limiting

Tests cover:
- Fixed-window counting against a mocked Redis client
- 429 responses, Retry-After and X-RateLimit headers
- Exempt paths and fail-open on Redis errors
- Wiring from Settings in create_app
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from jobboard import main
from jobboard.middleware.rate_limit import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    TOO_MANY_REQUESTS,
)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client that counts INCR calls per key."""
    counters = {}

    async def incr(key):
        counters[key] = counters.get(key, 0) + 1
        return counters[key]

    redis = AsyncMock()
    redis.incr = AsyncMock(side_effect=incr)
    redis.expire = AsyncMock(return_value=True)
    redis.ttl = AsyncMock(return_value=42)
    redis.close = AsyncMock()
    return redis


@pytest.fixture
def limiter(mock_redis):
    return FixedWindowRateLimiter(mock_redis, max_requests=3, window_seconds=900)


def make_app(limiter) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, limiter=limiter)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


class TestFixedWindowRateLimiter:
    @pytest.mark.asyncio
    async def test_first_hit_starts_window(self, limiter, mock_redis):
        result = await limiter.hit("1.2.3.4")

        assert result.allowed is True
        assert result.remaining == 2
        mock_redis.incr.assert_called_once_with("ratelimit:1.2.3.4")
        mock_redis.expire.assert_called_once_with("ratelimit:1.2.3.4", 900)

    @pytest.mark.asyncio
    async def test_later_hits_keep_window(self, limiter, mock_redis):
        await limiter.hit("1.2.3.4")
        await limiter.hit("1.2.3.4")

        assert mock_redis.expire.call_count == 1

    @pytest.mark.asyncio
    async def test_over_limit_rejected(self, limiter, mock_redis):
        for _ in range(3):
            assert (await limiter.hit("1.2.3.4")).allowed

        result = await limiter.hit("1.2.3.4")

        assert result.allowed is False
        assert result.remaining == 0
        assert result.retry_after == 42

    @pytest.mark.asyncio
    async def test_clients_counted_separately(self, limiter):
        for _ in range(3):
            await limiter.hit("1.2.3.4")

        assert (await limiter.hit("5.6.7.8")).allowed is True

    @pytest.mark.asyncio
    async def test_lost_expiry_restarts_window(self, limiter, mock_redis):
        mock_redis.ttl.return_value = -1
        for _ in range(4):
            result = await limiter.hit("1.2.3.4")

        assert result.allowed is False
        assert result.retry_after == 900
        assert mock_redis.expire.call_count == 2

    @pytest.mark.asyncio
    async def test_close(self, limiter, mock_redis):
        await limiter.close()
        mock_redis.close.assert_called_once()


class TestRateLimitMiddleware:
    def test_headers_on_allowed_request(self, limiter):
        with TestClient(make_app(limiter)) as client:
            response = client.get("/ping")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "3"
        assert response.headers["X-RateLimit-Remaining"] == "2"

    def test_429_after_limit(self, limiter):
        with TestClient(make_app(limiter)) as client:
            for _ in range(3):
                assert client.get("/ping").status_code == 200
            response = client.get("/ping")

        assert response.status_code == 429
        assert response.json() == {"error": TOO_MANY_REQUESTS}
        assert response.headers["Retry-After"] == "42"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_health_is_exempt(self, limiter, mock_redis):
        with TestClient(make_app(limiter)) as client:
            for _ in range(5):
                assert client.get("/health").status_code == 200

        mock_redis.incr.assert_not_called()

    def test_redis_error_fails_open(self, limiter, mock_redis):
        mock_redis.incr.side_effect = RedisConnectionError("Redis down")

        with TestClient(make_app(limiter)) as client:
            response = client.get("/ping")

        assert response.status_code == 200
        assert "X-RateLimit-Limit" not in response.headers


class TestRateLimitWiring:
    @pytest.fixture
    def limited_settings(self, settings):
        return settings.model_copy(
            update={"redis_url": "redis://localhost:6379/0", "rate_limit_requests": 2}
        )

    def test_enabled_with_redis_url(self, monkeypatch, limited_settings, mock_redis):
        monkeypatch.setattr(main, "IdentityCache", lambda *args, **kwargs: None)
        monkeypatch.setattr(
            FixedWindowRateLimiter,
            "from_url",
            classmethod(lambda cls, url, max_requests, window: cls(mock_redis, max_requests, window)),
        )

        with TestClient(main.create_app(limited_settings)) as client:
            codes = [client.post("/api/auth/signin", json={}).status_code for _ in range(3)]

        assert codes == [400, 400, 429]
        mock_redis.close.assert_called_once()

    def test_disabled_without_redis_url(self, client):
        for _ in range(5):
            response = client.post("/api/auth/signin", json={})
            assert response.status_code == 400
        assert "X-RateLimit-Limit" not in response.headers

    def test_disabled_with_zero_limit(self, monkeypatch, limited_settings):
        monkeypatch.setattr(main, "IdentityCache", lambda *args, **kwargs: None)
        from_url = AsyncMock()
        monkeypatch.setattr(FixedWindowRateLimiter, "from_url", from_url)

        app = main.create_app(limited_settings.model_copy(update={"rate_limit_requests": 0}))

        assert app is not None
        from_url.assert_not_called()
