"""
Rate Limiting

Per-client sliding-window limits for the public admissions endpoints. Hits
are counted in a Redis sorted set when the shared client is connected, and
in process memory otherwise (or when Redis errors mid-request).

Limited endpoints:
- POST /admissions/submit (each accepted call creates a record and sends email)
- POST /application-documents/upload (each accepted call writes to disk)
"""

import logging
import time
from collections import deque
from collections.abc import Callable, Mapping, Sequence
from functools import wraps
from typing import Any

from fastapi import HTTPException, Request, status

from app.core.redis import get_redis

logger = logging.getLogger(__name__)

KeyFunc = Callable[[Request], str]

# Fallback counters: key -> timestamps of hits still inside the window.
# Per process only; multiple workers each keep their own.
_memory_store: dict[str, deque[float]] = {}


class RateLimitExceeded(HTTPException):
    """429 with a Retry-After header equal to the window length."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "success": False,
                "error": "RATE_LIMIT_EXCEEDED",
                "message": (
                    f"Too many requests. At most {limit} are allowed every "
                    f"{window_seconds} seconds; please try again later."
                ),
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _redis_hits(client, key: str, window_seconds: int) -> int:
    """
    Record one hit in the sorted set at ``key`` and return the hits that
    preceded it inside the window.
    """
    now = time.time()

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now - window_seconds)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)
    _, previous_hits, *_ = await pipe.execute()

    return previous_hits


def _memory_allow(key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    hits = _memory_store.setdefault(key, deque())

    while hits and hits[0] <= now - window_seconds:
        hits.popleft()

    if len(hits) >= limit:
        return False

    hits.append(now)
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Count one request against ``key``.

    Args:
        key: Bucket name, e.g. "rate_limit:admissions_submit:203.0.113.7"
        limit: Requests allowed per window
        window_seconds: Window length

    Returns:
        False once the bucket already holds ``limit`` hits in the window
    """
    client = await get_redis()

    if client is not None:
        try:
            return await _redis_hits(client, key, window_seconds) < limit
        except Exception as e:
            logger.warning(f"Redis rate limit check failed for {key}, counting in memory: {e}")

    return _memory_allow(key, limit, window_seconds)


def client_ip_key(scope: str) -> KeyFunc:
    """
    Key requests by client IP within ``scope``.

    Behind a proxy the first X-Forwarded-For hop is the client.
    """

    def key_func(request: Request) -> str:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            ip = forwarded.split(",")[0].strip()
        elif request.client:
            ip = request.client.host
        else:
            ip = "unknown"
        return f"rate_limit:{scope}:{ip}"

    return key_func


def _find_request(args: Sequence[Any], kwargs: Mapping[str, Any]) -> Request | None:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    return None


def rate_limit(
    limit: int = 10,
    window_seconds: int = 60,
    key_func: KeyFunc | None = None,
):
    """
    Decorate a FastAPI endpoint that takes a ``Request`` parameter.

    Usage:
        @router.post("/upload")
        @rate_limit(limit=60, window_seconds=900, key_func=client_ip_key("uploads"))
        async def upload(request: Request, ...):
            ...

    Without ``key_func`` requests are keyed by client IP and path.

    Raises:
        RateLimitExceeded: When the bucket is full
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = _find_request(args, kwargs)
            if request is None:
                logger.warning(f"{func.__name__} has no Request argument; not rate limited")
                return await func(*args, **kwargs)

            if key_func is not None:
                key = key_func(request)
            else:
                host = request.client.host if request.client else "unknown"
                key = f"rate_limit:{host}:{request.url.path}"

            if not await check_rate_limit(key, limit, window_seconds):
                logger.warning(f"Rate limit hit for {key} ({limit}/{window_seconds}s)")
                raise RateLimitExceeded(limit, window_seconds)

            return await func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "RateLimitExceeded",
    "check_rate_limit",
    "client_ip_key",
    "rate_limit",
]
