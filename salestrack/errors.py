"""Domain error taxonomy + Flask handler registration.

Every failure leaves the app through a single boundary that renders the
``{"success": false, "error": {...}}`` envelope. Status codes are a pure
function of the error code.
"""
from __future__ import annotations

import logging
from typing import Any

from flask import Flask, request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import NoResultFound
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from .rate_limiter import RateLimitError
from .responses import FieldError, make_error

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[str, int] = {
    # input
    "BAD_REQUEST": 400,
    "VALIDATION_ERROR": 400,
    "INVALID_DATE": 400,
    "NOT_MONDAY": 400,
    "INVALID_VALUE": 400,
    "INVALID_METRICS": 400,
    "INVALID_EMAIL": 400,
    "WEAK_PASSWORD": 400,
    "INVALID_ROLE": 400,
    "ORGANIZATION_NOT_FOUND": 400,
    "NO_ORGANIZATION": 400,
    # authentication
    "UNAUTHORIZED": 401,
    "NO_TOKEN": 401,
    "INVALID_TOKEN": 401,
    "TOKEN_EXPIRED": 401,
    "AUTH_ERROR": 401,
    "USER_NOT_FOUND": 401,
    "INVALID_CREDENTIALS": 401,
    # authorization
    "FORBIDDEN": 403,
    # missing
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,
    # conflicts
    "EMAIL_EXISTS": 409,
    "ORGANIZATION_EXISTS": 409,
    "DUPLICATE_ENTRY": 409,
    # throttling
    "RATE_LIMIT_EXCEEDED": 429,
    "AUTH_RATE_LIMIT": 429,
    "INTERNAL_ERROR": 500,
}


def status_for(code: str) -> int:
    return STATUS_BY_CODE.get(code, 500)


class ApiError(Exception):
    """Base for errors rendered with a stable machine-readable code."""

    code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        details: list[FieldError] | None = None,
    ):
        if code:
            self.code = code
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return status_for(self.code)


class ValidationError(ApiError):
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, details: list[FieldError], message: str | None = None):
        super().__init__(None, message, details=details)


class NotFoundError(ApiError):
    code = "NOT_FOUND"
    default_message = "The requested record was not found"


class NoOrganizationError(ApiError):
    code = "NO_ORGANIZATION"
    default_message = "User is not part of an organization"


def _render(err: ApiError) -> Response:
    return make_error(err.code, err.message, err.status, err.details)


_HTTP_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _h_api(err: ApiError) -> Response:
        if err.status >= 500:
            logger.error("api error %s: %s", err.code, err.message)
        return _render(err)

    @app.errorhandler(RateLimitError)
    def _h_rate_limit(err: RateLimitError) -> Response:
        logger.warning("rate limit hit limit=%s retry_after=%s", err.limit, err.retry_after)
        return make_error(err.code, str(err), status_for(err.code), retry_after=err.retry_after)

    @app.errorhandler(IntegrityError)
    def _h_integrity(err: IntegrityError) -> Response:
        # Unique constraint raced past the pre-checks
        logger.warning("integrity error on %s %s: %s", request.method, request.path, err.orig)
        return make_error("DUPLICATE_ENTRY", "A record with this value already exists", 409)

    @app.errorhandler(NoResultFound)
    def _h_no_result(_err: NoResultFound) -> Response:
        return make_error("NOT_FOUND", "The requested record was not found", 404)

    @app.errorhandler(HTTPException)
    def _h_http(ex: HTTPException) -> Response:
        status = ex.code or 500
        if status == 404:
            return make_error("NOT_FOUND", f"Route {request.path} not found", 404)
        code = _HTTP_CODES.get(status)
        if code is None:
            if status >= 500:
                return make_error("INTERNAL_ERROR", "Internal server error", 500)
            code = "BAD_REQUEST"
        return make_error(code, ex.description or code, status_for(code))

    @app.errorhandler(Exception)
    def _h_exception(ex: Exception) -> Response:
        logger.exception(
            "Unhandled exception method=%s path=%s ip=%s",
            request.method,
            request.path,
            request.remote_addr,
        )
        return make_error("INTERNAL_ERROR", "Internal server error", 500)


def field_error(field: str, message: str) -> FieldError:
    return {"field": field, "message": message}


def require_fields(data: dict[str, Any], *names: str) -> None:
    """Raise VALIDATION_ERROR listing every missing/blank string field."""
    details = [
        field_error(n, f"{n} is required")
        for n in names
        if not isinstance(data.get(n), str) or not data.get(n, "").strip()
    ]
    if details:
        raise ValidationError(details)


__all__ = [
    "STATUS_BY_CODE",
    "status_for",
    "ApiError",
    "ValidationError",
    "NotFoundError",
    "NoOrganizationError",
    "register_error_handlers",
    "field_error",
    "require_fields",
]
