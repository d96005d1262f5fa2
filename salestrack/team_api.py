"""Team views: a manager's organization, its members, their goals and weeks."""

from __future__ import annotations

from flask import Blueprint, request
from flask.typing import ResponseReturnValue

from .activity_service import get_week, list_all, save_week, serialize
from .app_authz import require_roles, require_same_organization
from .db import get_session
from .errors import NoOrganizationError
from .goals_service import member_goals
from .identity import current_identity, identity_of
from .models import Organization, User
from .responses import success
from .roles import PRIVILEGED_ROLES
from .users_api import member_json

bp = Blueprint("team_api", __name__, url_prefix="/api/team")


@bp.get("/organizations")
def organizations() -> ResponseReturnValue:
    orgs = get_session().query(Organization).order_by(Organization.name.asc()).all()
    return success(
        [
            {"id": o.id, "name": o.name, "createdAt": o.created_at.isoformat() if o.created_at else None}
            for o in orgs
        ]
    )


@bp.get("/members")
@require_roles(*PRIVILEGED_ROLES)
def members() -> ResponseReturnValue:
    ident = current_identity()
    org_id = ident["organization_id"]
    if org_id is None:
        raise NoOrganizationError()
    users = (
        get_session()
        .query(User)
        .filter(User.organization_id == org_id, User.id != ident["id"])
        .order_by(User.role.asc(), User.first_name.asc())
        .all()
    )
    return success([member_json(u) for u in users])


@bp.get("/member/<user_id>/goals")
@require_roles(*PRIVILEGED_ROLES)
def goals(user_id: str) -> ResponseReturnValue:
    db = get_session()
    target = require_same_organization(db, current_identity(), user_id)
    return success(member_goals(db, identity_of(target)))


@bp.get("/member/<user_id>/activity")
@require_roles(*PRIVILEGED_ROLES)
def activity_all(user_id: str) -> ResponseReturnValue:
    db = get_session()
    target = require_same_organization(db, current_identity(), user_id)
    rows = list_all(db, target.id, request.args.get("startDate"), request.args.get("endDate"))
    return success([serialize(r, include_ids=True) for r in rows])


@bp.get("/member/<user_id>/activity/<week_start>")
@require_roles(*PRIVILEGED_ROLES)
def activity_week(user_id: str, week_start: str) -> ResponseReturnValue:
    db = get_session()
    target = require_same_organization(db, current_identity(), user_id)
    row = get_week(db, target.id, week_start)
    if row is None:
        return success(message="No data found for this week")
    return success(serialize(row, include_ids=True))


@bp.post("/member/<user_id>/activity")
@require_roles(*PRIVILEGED_ROLES)
def activity_save(user_id: str) -> ResponseReturnValue:
    db = get_session()
    target = require_same_organization(db, current_identity(), user_id)
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    row = save_week(db, target.id, payload.get("weekStartDate"), payload)
    return success(serialize(row, include_ids=True), "Team member activity updated successfully")
