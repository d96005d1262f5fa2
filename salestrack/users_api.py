"""User directory and per-user activity views for managers/admins.

Visibility follows ``organization_scope``: a caller sees the users of their
own organization.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request
from flask.typing import ResponseReturnValue

from .activity_service import get_week, list_all, serialize
from .app_authz import organization_scope, require_roles, scoped_user
from .db import get_session
from .identity import current_identity
from .models import User
from .responses import success
from .roles import PRIVILEGED_ROLES
from .validators import parse_week_start, require_uuid

bp = Blueprint("users_api", __name__, url_prefix="/api/users")


def member_json(u: User) -> dict[str, Any]:
    return {
        "id": u.id,
        "email": u.email,
        "firstName": u.first_name,
        "lastName": u.last_name,
        "role": u.role,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }


@bp.get("")
@require_roles(*PRIVILEGED_ROLES)
def list_users() -> ResponseReturnValue:
    scope = organization_scope(current_identity())
    q = get_session().query(User)
    if scope is not None:
        q = q.filter(User.organization_id == scope)
    users = q.order_by(User.created_at.desc()).all()
    return success([member_json(u) for u in users])


@bp.get("/<user_id>/activity/week/<week_start_date>")
@require_roles(*PRIVILEGED_ROLES)
def user_week(user_id: str, week_start_date: str) -> ResponseReturnValue:
    require_uuid(user_id, "userId")
    week = parse_week_start(week_start_date)
    db = get_session()
    target = scoped_user(db, current_identity(), user_id)
    row = get_week(db, target.id, week)
    if row is None:
        return success(message="No activity found for this week")
    return success(serialize(row))


@bp.get("/<user_id>/activity/all")
@require_roles(*PRIVILEGED_ROLES)
def user_all(user_id: str) -> ResponseReturnValue:
    require_uuid(user_id, "userId")
    db = get_session()
    target = scoped_user(db, current_identity(), user_id)
    rows = list_all(db, target.id, request.args.get("startDate"), request.args.get("endDate"))
    return success([serialize(r) for r in rows])
