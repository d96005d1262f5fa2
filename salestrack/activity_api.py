"""Activity API for the caller's own weeks."""

from __future__ import annotations

from flask import Blueprint, request
from flask.typing import ResponseReturnValue

from .activity_service import get_week, list_all, save_week, serialize
from .db import get_session
from .identity import authenticated, current_identity
from .responses import success

bp = Blueprint("activity_api", __name__, url_prefix="/api/activity")


@bp.get("/week/<week_start_date>")
@authenticated
def week(week_start_date: str) -> ResponseReturnValue:
    row = get_week(get_session(), current_identity()["id"], week_start_date)
    if row is None:
        return success(message="No activity found for this week")
    return success(serialize(row))


@bp.post("/week")
@authenticated
def save() -> ResponseReturnValue:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    row = save_week(get_session(), current_identity()["id"], payload.get("weekStartDate"), payload)
    return success(serialize(row), "Weekly activity saved successfully")


@bp.get("/all")
@authenticated
def all_weeks() -> ResponseReturnValue:
    rows = list_all(
        get_session(),
        current_identity()["id"],
        request.args.get("startDate"),
        request.args.get("endDate"),
    )
    return success([serialize(r) for r in rows])
