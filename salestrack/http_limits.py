"""HTTP rate limiting.

``enforce`` is called from the app-wide before_request hook for the general
"api" limit; ``@limit`` wraps individual views (the auth endpoints).
Both key on the client address.
"""
from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import request

from .limit_registry import get_limit
from .metrics import increment as metrics_increment
from .rate_limiter import RateLimitError, get_rate_limiter

LimiterKeyFunc = Callable[[], str]

# limit name -> (error code, client-facing message)
LIMIT_ERRORS: dict[str, tuple[str, str]] = {
    "api": ("RATE_LIMIT_EXCEEDED", "Too many requests, please try again later."),
    "auth": ("AUTH_RATE_LIMIT", "Too many authentication attempts, please try again later."),
}


def _DEF_KEY() -> str:
    return request.remote_addr or "unknown"


def enforce(name: str, key_func: LimiterKeyFunc = _DEF_KEY) -> None:
    ld, _src = get_limit(name)
    logical_key = f"{name}:{key_func()}"
    rl = get_rate_limiter()
    allowed = rl.allow(logical_key, quota=ld["quota"], per_seconds=ld["per_seconds"])
    metrics_increment(
        "rate_limit.hit",
        {"name": name, "outcome": "allow" if allowed else "block", "window": str(ld["per_seconds"])},
    )
    if not allowed:
        code, message = LIMIT_ERRORS.get(name, LIMIT_ERRORS["api"])
        raise RateLimitError(
            message,
            retry_after=rl.retry_after(logical_key, per_seconds=ld["per_seconds"]),
            limit=name,
            code=code,
        )


def limit(name: str, *, key_func: LimiterKeyFunc = _DEF_KEY):

    def decorator(fn: Callable[..., Any]):
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any):
            enforce(name, key_func)
            return fn(*args, **kwargs)

        return wrapper

    return decorator

__all__ = ["LIMIT_ERRORS", "enforce", "limit"]
