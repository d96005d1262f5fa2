"""Logging wiring.

``RequestContextFilter`` stamps request_id, method, path and remote_addr on
every record emitted inside a request (``-`` outside one), so handlers can
format them without each call site passing them along.
"""

from __future__ import annotations

import logging

from flask import g, has_request_context, request

ACCESS_LOGGER = "salestrack.access"
_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s %(method)s %(path)s] %(message)s"


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_id = getattr(g, "request_id", "-")
            record.method = request.method
            record.path = request.path
            record.remote_addr = request.remote_addr or "-"
        else:
            record.request_id = "-"
            record.method = "-"
            record.path = "-"
            record.remote_addr = "-"
        return True


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one context-aware stream handler to the ``salestrack`` logger."""
    root = logging.getLogger("salestrack")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    # Avoid duplicate attachment when several apps are created (tests)
    if not any(isinstance(f, RequestContextFilter) for h in root.handlers for f in h.filters):
        h = logging.StreamHandler()
        h.addFilter(RequestContextFilter())
        h.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(h)
    return root


__all__ = ["ACCESS_LOGGER", "RequestContextFilter", "configure_logging"]
