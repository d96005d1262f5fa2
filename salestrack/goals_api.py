"""Goals API: effective goals for the caller; organization-wide updates."""

from __future__ import annotations

from flask import Blueprint, request
from flask.typing import ResponseReturnValue

from .app_authz import require_roles
from .db import get_session
from .goals_service import resolve, update
from .identity import authenticated, current_identity
from .responses import success
from .roles import PRIVILEGED_ROLES

bp = Blueprint("goals_api", __name__, url_prefix="/api/goals")


@bp.get("")
@authenticated
def get_goals() -> ResponseReturnValue:
    return success(resolve(get_session(), current_identity()))


@bp.put("")
@require_roles(*PRIVILEGED_ROLES)
def put_goals() -> ResponseReturnValue:
    data = update(get_session(), current_identity(), request.get_json(silent=True))
    return success(
        data,
        "Organization goals updated successfully. All team members will see these goals.",
    )
