"""Fixed-window limiter on Redis, shared by every worker process.

One counter key per (logical key, window); the first increment in a window
sets its expiry (``EXPIRE ... NX``) in the same transaction, so a crashed
client cannot leave a counter without a TTL. retry_after reads the TTL back.
"""
from __future__ import annotations

import redis

from .rate_limiter import RateLimiter, window_start


class RedisRateLimiter(RateLimiter):  # type: ignore[misc]
    def __init__(self, url: str, prefix: str, client: redis.Redis | None = None) -> None:
        self._client = client if client is not None else redis.Redis.from_url(url, decode_responses=False)
        self._prefix = prefix

    def _bucket(self, logical_key: str, per_seconds: int) -> str:
        return f"{self._prefix}{logical_key}:{window_start(size=per_seconds)}"

    def allow(self, key: str, quota: int, per_seconds: int) -> bool:
        bucket = self._bucket(key, per_seconds)
        pipe = self._client.pipeline(transaction=True)
        pipe.incr(bucket, 1)
        pipe.expire(bucket, per_seconds, nx=True)
        count, _ = pipe.execute()
        return int(count) <= quota

    def retry_after(self, key: str, per_seconds: int) -> int:
        ttl = self._client.ttl(self._bucket(key, per_seconds))
        if ttl is None or int(ttl) < 0:
            return per_seconds
        return int(ttl)


__all__ = ["RedisRateLimiter"]
