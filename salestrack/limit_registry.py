"""Named rate limit registry.

Resolves name -> LimitDefinition with resolution order:
1. RATE_LIMITS_JSON override (e.g. ``{"auth": {"quota": 10, "per": 900}}``)
2. Default seeded from Config at startup ("api", "auth")
3. Fallback safe default (quota=100, per_seconds=900)

Clamps:
- quota >= 1 (values <=0 -> 1)
- per_seconds in [1, 86400]
"""
from __future__ import annotations

from collections.abc import Mapping
from json import JSONDecodeError, loads
from typing import Any, TypedDict

from . import metrics as metrics_mod

class LimitDefinition(TypedDict):
    quota: int
    per_seconds: int

_limits: dict[str, LimitDefinition] = {}
_sources: dict[str, str] = {}

_FALLBACK: LimitDefinition = {"quota": 100, "per_seconds": 900}
_MAX_WINDOW = 86400


def _as_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _clamp(q: Any, p: Any) -> LimitDefinition:
    quota = max(1, _as_int(q, _FALLBACK["quota"]))
    per = min(_MAX_WINDOW, max(1, _as_int(p, _FALLBACK["per_seconds"])))
    return {"quota": quota, "per_seconds": per}


def parse_limits(raw: str | Mapping[str, Any]) -> dict[str, LimitDefinition]:
    if isinstance(raw, str):
        try:
            data = loads(raw or "{}")
        except JSONDecodeError:
            return {}
        if not isinstance(data, dict):
            return {}
    else:
        data = dict(raw)
    out: dict[str, LimitDefinition] = {}
    for k, v in data.items():
        if not isinstance(v, Mapping):
            continue
        out[k] = _clamp(v.get("quota"), v.get("per") or v.get("per_seconds"))
    return out


def configure(defaults: Mapping[str, LimitDefinition], overrides_raw: str | Mapping[str, Any] | None = None) -> None:
    """Reset registry: config defaults first, then JSON overrides on top."""
    _limits.clear()
    _sources.clear()
    for name, ld in defaults.items():
        _limits[name] = _clamp(ld["quota"], ld["per_seconds"])
        _sources[name] = "default"
    for name, ld in (parse_limits(overrides_raw) if overrides_raw else {}).items():
        _limits[name] = ld
        _sources[name] = "override"


def get_limit(name: str) -> tuple[LimitDefinition, str]:
    if name in _limits:
        src = _sources.get(name, "default")
        metrics_mod.increment("rate_limit.lookup", {"name": name, "source": src})
        return _limits[name], src
    metrics_mod.increment("rate_limit.lookup", {"name": name, "source": "fallback"})
    return _FALLBACK, "fallback"

__all__ = [
    "LimitDefinition",
    "parse_limits",
    "configure",
    "get_limit",
]
