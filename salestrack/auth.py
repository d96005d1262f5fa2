from __future__ import annotations

from flask import Blueprint, current_app, request
from flask.typing import ResponseReturnValue

from .account_service import login as svc_login, register as svc_register
from .db import get_session
from .http_limits import limit
from .identity import authenticated, current_identity, identity_to_json
from .responses import success

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
@limit("auth")
def register() -> ResponseReturnValue:
    data = svc_register(get_session(), request.get_json(silent=True), current_app.config)
    return success(data, "User registered successfully", 201)


@bp.post("/login")
@limit("auth")
def login() -> ResponseReturnValue:
    data = svc_login(get_session(), request.get_json(silent=True), current_app.config)
    return success(data, "Login successful")


@bp.get("/me")
@limit("auth")
@authenticated
def me() -> ResponseReturnValue:
    return success(identity_to_json(current_identity()))
