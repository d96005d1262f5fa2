"""Security middleware.

 - CORS allow-list (CORS_ALLOWED_ORIGINS); empty list disables CORS headers.
 - Preflight (OPTIONS) requests from allowed origins short-circuit with 204.
 - Baseline security headers on every response.
"""

from __future__ import annotations

from flask import Flask, make_response, request
from werkzeug.wrappers.response import Response

_ALLOWED_METHODS = "GET,POST,PUT,DELETE,OPTIONS"


def _allowed_origin(app: Flask) -> str | None:
    allowed: list[str] = app.config.get("CORS_ALLOWED_ORIGINS", []) or []
    origin = request.headers.get("Origin")
    if not origin or not allowed:
        return None
    if origin in allowed or "*" in allowed:
        return origin
    return None


def _apply_cors(app: Flask, resp: Response) -> Response:
    origin = _allowed_origin(app)
    if origin is None:
        return resp
    resp.headers.setdefault("Vary", "Origin")
    resp.headers["Access-Control-Allow-Origin"] = origin
    resp.headers["Access-Control-Allow-Methods"] = _ALLOWED_METHODS
    req_hdrs = request.headers.get("Access-Control-Request-Headers")
    resp.headers["Access-Control-Allow-Headers"] = req_hdrs or "Authorization,Content-Type"
    resp.headers["Access-Control-Allow-Credentials"] = "true"
    resp.headers["Access-Control-Max-Age"] = "600"
    return resp


def init_security(app: Flask) -> None:
    @app.before_request
    def _security_before_request() -> Response | None:
        if request.method == "OPTIONS" and _allowed_origin(app) is not None:
            return make_response("", 204)
        return None

    @app.after_request
    def _security_after_request(resp: Response) -> Response:
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if not app.config.get("TESTING") and not app.config.get("DEBUG"):
            resp.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")
        return _apply_cors(app, resp)


__all__ = ["init_security"]
