"""
Tests for the rate limiter.
"""

from collections import deque
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request

from app.core import rate_limit
from app.core.rate_limit import RateLimitExceeded, check_rate_limit, client_ip_key


def _request(client_host: str = "198.51.100.4", headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/admissions/submit",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_host, 50000),
    }
    return Request(scope)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client; results[1] of the pipeline is the hit count."""
    redis = MagicMock()
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 0, 1, True])
    redis.pipeline.return_value = pipe
    return redis


class TestMemoryFallback:
    @pytest.mark.asyncio
    async def test_allows_up_to_limit(self):
        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=None)):
            results = [await check_rate_limit("rate_limit:test:ip", 3, 60) for _ in range(4)]

        assert results == [True, True, True, False]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=None)):
            assert await check_rate_limit("rate_limit:test:a", 1, 60)
            assert await check_rate_limit("rate_limit:test:b", 1, 60)
            assert not await check_rate_limit("rate_limit:test:a", 1, 60)

    @pytest.mark.asyncio
    async def test_expired_entries_ignored(self):
        rate_limit._memory_store["rate_limit:test:old"] = deque([0.0, 1.0])

        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=None)):
            assert await check_rate_limit("rate_limit:test:old", 2, 60)


class TestRedisBackend:
    @pytest.mark.asyncio
    async def test_allowed_below_limit(self, mock_redis):
        mock_redis.pipeline.return_value.execute.return_value = [0, 2, 1, True]

        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=mock_redis)):
            assert await check_rate_limit("rate_limit:test:ip", 3, 60)

        pipe = mock_redis.pipeline.return_value
        pipe.zremrangebyscore.assert_called_once()
        pipe.zadd.assert_called_once()
        pipe.expire.assert_called_once_with("rate_limit:test:ip", 60)

    @pytest.mark.asyncio
    async def test_blocked_at_limit(self, mock_redis):
        mock_redis.pipeline.return_value.execute.return_value = [0, 3, 1, True]

        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=mock_redis)):
            assert not await check_rate_limit("rate_limit:test:ip", 3, 60)

    @pytest.mark.asyncio
    async def test_redis_error_falls_back_to_memory(self, mock_redis):
        mock_redis.pipeline.return_value.execute.side_effect = ConnectionError("redis down")

        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=mock_redis)):
            assert await check_rate_limit("rate_limit:test:ip", 1, 60)
            assert not await check_rate_limit("rate_limit:test:ip", 1, 60)


class TestClientIpKey:
    def test_uses_client_host(self):
        key_func = client_ip_key("admissions_submit")
        assert key_func(_request()) == "rate_limit:admissions_submit:198.51.100.4"

    def test_prefers_first_forwarded_hop(self):
        key_func = client_ip_key("application_documents_upload")
        request = _request(headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert key_func(request) == "rate_limit:application_documents_upload:203.0.113.7"


class TestDecorator:
    @pytest.mark.asyncio
    async def test_raises_when_exceeded(self):
        @rate_limit.rate_limit(limit=1, window_seconds=30, key_func=client_ip_key("test"))
        async def endpoint(request: Request):
            return "ok"

        with patch("app.core.rate_limit.get_redis", new=AsyncMock(return_value=None)):
            assert await endpoint(_request()) == "ok"
            with pytest.raises(RateLimitExceeded) as exc_info:
                await endpoint(request=_request())

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers == {"Retry-After": "30"}
        assert exc_info.value.detail["retry_after_seconds"] == 30

    @pytest.mark.asyncio
    async def test_without_request_passes_through(self):
        @rate_limit.rate_limit(limit=0, window_seconds=30)
        async def endpoint(value: int):
            return value * 2

        assert await endpoint(21) == 42
