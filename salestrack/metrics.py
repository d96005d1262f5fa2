"""Process-wide counters.

Call sites use ``increment(name, tags)``; the backend is chosen once by the
app factory (noop by default, logging with METRICS_BACKEND=log).
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Protocol


class Metrics(Protocol):
    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None: ...  # pragma: no cover - interface only


class _NoopMetrics:
    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None:
        return


class InMemoryMetrics:
    """Keeps counts per (name, sorted tags); handy for assertions."""

    def __init__(self) -> None:
        self.counts: Counter[tuple[str, tuple[tuple[str, str], ...]]] = Counter()

    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None:
        self.counts[(name, tuple(sorted((tags or {}).items())))] += 1

    def total(self, metric: str, /, **tags: str) -> int:
        want = set(tags.items())
        return sum(n for (nm, tg), n in self.counts.items() if nm == metric and want <= set(tg))


_metrics: Metrics = _NoopMetrics()


def set_metrics(m: Metrics) -> None:
    global _metrics
    _metrics = m


def reset_metrics() -> None:
    set_metrics(_NoopMetrics())


def increment(name: str, tags: Mapping[str, str] | None = None) -> None:
    _metrics.increment(name, tags)


__all__ = ["Metrics", "InMemoryMetrics", "set_metrics", "reset_metrics", "increment"]
