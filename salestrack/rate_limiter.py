"""Typed RateLimiter protocol (allow/retry_after) and a process-wide instance selected at startup."""
from __future__ import annotations

import logging
import time
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class RateLimitError(Exception):
    """Raised when a request exceeds the configured rate limit.

    Attributes:
        retry_after: Seconds until next permitted attempt.
        limit: Symbolic limit name ("api", "auth").
        code: Error code rendered in the envelope.
    """
    def __init__(self, message: str, retry_after: int, limit: str | None = None, code: str = "RATE_LIMIT_EXCEEDED") -> None:
        super().__init__(message)
        self.retry_after = retry_after
        self.limit = limit
        self.code = code

@runtime_checkable
class RateLimiter(Protocol):
    def allow(self, key: str, quota: int, per_seconds: int) -> bool: ...  # pragma: no cover
    def retry_after(self, key: str, per_seconds: int) -> int: ...  # pragma: no cover


class NoopRateLimiter:
    """Never throttles; used when RATE_LIMIT_BACKEND=noop or before the app factory ran."""

    def allow(self, key: str, quota: int, per_seconds: int) -> bool:
        return True

    def retry_after(self, key: str, per_seconds: int) -> int:
        return 0


_instance: RateLimiter | None = None


def _build(backend: str, redis_url: str | None, prefix: str) -> RateLimiter:
    if backend == "memory":  # in-process fixed window, single worker deployments and tests
        from .rate_limiter_memory import MemoryRateLimiter
        return MemoryRateLimiter()
    if backend == "redis":
        from .rate_limiter_redis import RedisRateLimiter  # local import keeps redis off the default path
        return RedisRateLimiter(redis_url or "redis://localhost:6379/0", prefix)
    return NoopRateLimiter()


def init_rate_limiter(backend: str = "memory", redis_url: str | None = None, prefix: str = "salestrack:rl:") -> RateLimiter:
    """(Re)build the process-wide limiter; called once by the app factory."""
    global _instance
    _instance = _build((backend or "memory").strip().lower(), redis_url, prefix)
    logger.info("Rate limiter backend initialized: %s", type(_instance).__name__)
    return _instance


def get_rate_limiter() -> RateLimiter:
    global _instance
    if _instance is None:
        _instance = _build("noop", None, "")
    return _instance


def window_start(epoch: float | None = None, size: int = 60) -> int:
    """Return the epoch second representing the window bucket start."""
    e = int(epoch if epoch is not None else time.time())
    return e - (e % size)

__all__ = [
    "RateLimiter",
    "RateLimitError",
    "NoopRateLimiter",
    "init_rate_limiter",
    "get_rate_limiter",
    "window_start",
]
