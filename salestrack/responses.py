"""Shared JSON envelope helpers for consistent success and error responses.

Success: {"success": true, "message"?: str, "data"?: any}
Error:   {"success": false, "error": {"code", "message", "details"?}}
"""
from __future__ import annotations

from typing import Any, Literal, NotRequired, TypedDict

from flask import g, jsonify
from werkzeug.wrappers.response import Response


class FieldError(TypedDict):
    field: str
    message: str


class ErrorBody(TypedDict):
    code: str
    message: str
    details: NotRequired[list[FieldError]]


class ErrorEnvelope(TypedDict):
    success: Literal[False]
    error: ErrorBody


def _finish(payload: dict[str, Any], status: int) -> Response:
    resp = jsonify(payload)
    resp.status_code = status
    rid = getattr(g, "request_id", None)
    if rid and "X-Request-Id" not in resp.headers:
        resp.headers["X-Request-Id"] = rid
    return resp


def success(data: Any = None, message: str | None = None, status: int = 200) -> Response:
    payload: dict[str, Any] = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return _finish(payload, status)


def make_error(
    code: str,
    message: str,
    status: int = 400,
    details: list[FieldError] | None = None,
    retry_after: int | None = None,
) -> Response:
    body: ErrorBody = {"code": code, "message": message}
    if details:
        body["details"] = details
    envelope: ErrorEnvelope = {"success": False, "error": body}
    resp = _finish(dict(envelope), status)
    if retry_after is not None:
        resp.headers["Retry-After"] = str(int(retry_after))
    return resp


__all__ = ["FieldError", "ErrorBody", "ErrorEnvelope", "success", "make_error"]
