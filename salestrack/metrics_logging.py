from __future__ import annotations

import logging
from collections.abc import Mapping

from .metrics import Metrics

logger = logging.getLogger("salestrack.metrics")


class LoggingMetrics(Metrics):
    """METRICS_BACKEND=log: one INFO line per counter bump."""

    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None:
        logger.info("metric %s %s", name, " ".join(f"{k}={v}" for k, v in sorted((tags or {}).items())))
