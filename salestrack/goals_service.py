"""Goals resolution and updates.

Reads resolve the single effective goals record for a caller, creating one
with system defaults when none exists. Writes only ever target the
organization-wide record, so every member of an organization shares it.
"""
from __future__ import annotations

import logging
from typing import Any, TypedDict

from sqlalchemy.orm import Session

from .errors import ApiError, NoOrganizationError, ValidationError, field_error
from .identity import Identity
from .models import DEFAULT_GOALS, Goals
from .roles import is_privileged
from .validators import MAX_COUNTER, is_int

logger = logging.getLogger(__name__)

# Not persisted; merged into every projection
MEETINGS_PER_DAY = 2
MEETINGS_PER_WEEK = 10

# wire name -> column name
GOAL_FIELDS: dict[str, str] = {
    "callsPerDay": "calls_per_day",
    "emailsPerDay": "emails_per_day",
    "contactsPerDay": "contacts_per_day",
    "responsesPerDay": "responses_per_day",
    "callsPerWeek": "calls_per_week",
    "emailsPerWeek": "emails_per_week",
    "contactsPerWeek": "contacts_per_week",
    "responsesPerWeek": "responses_per_week",
}


class GoalsData(TypedDict):
    callsPerDay: int
    emailsPerDay: int
    contactsPerDay: int
    responsesPerDay: int
    meetingsPerDay: int
    callsPerWeek: int
    emailsPerWeek: int
    contactsPerWeek: int
    responsesPerWeek: int
    meetingsPerWeek: int


def _project(values: dict[str, int]) -> GoalsData:
    return {
        "callsPerDay": values["calls_per_day"],
        "emailsPerDay": values["emails_per_day"],
        "contactsPerDay": values["contacts_per_day"],
        "responsesPerDay": values["responses_per_day"],
        "meetingsPerDay": MEETINGS_PER_DAY,
        "callsPerWeek": values["calls_per_week"],
        "emailsPerWeek": values["emails_per_week"],
        "contactsPerWeek": values["contacts_per_week"],
        "responsesPerWeek": values["responses_per_week"],
        "meetingsPerWeek": MEETINGS_PER_WEEK,
    }


def project(goals: Goals) -> GoalsData:
    return _project({col: getattr(goals, col) for col in GOAL_FIELDS.values()})


def default_goals_data() -> GoalsData:
    return _project(dict(DEFAULT_GOALS))


def _active_org_goals(db: Session, organization_id: str) -> Goals | None:
    return (
        db.query(Goals)
        .filter(
            Goals.organization_id == organization_id,
            Goals.user_id.is_(None),
            Goals.is_active.is_(True),
        )
        .order_by(Goals.created_at.asc())
        .first()
    )


def _active_personal_goals(db: Session, user_id: str) -> Goals | None:
    return (
        db.query(Goals)
        .filter(Goals.user_id == user_id, Goals.is_active.is_(True))
        .order_by(Goals.created_at.asc())
        .first()
    )


def _create(db: Session, *, organization_id: str | None = None, user_id: str | None = None, **values: int) -> Goals:
    g = Goals(organization_id=organization_id, user_id=user_id, **{**DEFAULT_GOALS, **values})
    db.add(g)
    db.commit()
    logger.info("goals created scope=%s id=%s", "organization" if organization_id else "personal", g.id)
    return g


def resolve(db: Session, identity: Identity) -> GoalsData:
    """Effective goals for ``identity``.

    sales_rep: organization goals (created on demand) or the static defaults
    when the rep has no organization. manager/admin: organization goals, then
    personal goals, then a new organization record, then a new personal one.
    """
    org_id = identity["organization_id"]
    if not is_privileged(identity["role"]):
        if org_id is None:
            return default_goals_data()
        goals = _active_org_goals(db, org_id) or _create(db, organization_id=org_id)
        return project(goals)
    goals = None
    if org_id is not None:
        goals = _active_org_goals(db, org_id)
    if goals is None:
        goals = _active_personal_goals(db, identity["id"])
    if goals is None:
        if org_id is not None:
            goals = _create(db, organization_id=org_id)
        else:
            goals = _create(db, user_id=identity["id"])
    return project(goals)


def parse_goals_payload(payload: Any) -> dict[str, int]:
    """Validate all eight counters; returns column name -> value."""
    if not isinstance(payload, dict):
        payload = {}
    details = []
    values: dict[str, int] = {}
    for wire, col in GOAL_FIELDS.items():
        v = payload.get(wire)
        if v is None:
            details.append(field_error(wire, f"{wire} is required"))
        elif not is_int(v):
            details.append(field_error(wire, f"{wire} must be an integer"))
        elif v > MAX_COUNTER:
            details.append(field_error(wire, f"{wire} must be at most {MAX_COUNTER}"))
        else:
            values[col] = v
    if details:
        raise ValidationError(details)
    if any(v < 0 for v in values.values()):
        raise ApiError("INVALID_METRICS", "All metric values must be non-negative")
    return values


def update(db: Session, identity: Identity, payload: Any) -> GoalsData:
    """Overwrite (or create) the caller's organization goals.

    Role gating happens in the view; this only validates and writes.
    """
    values = parse_goals_payload(payload)
    org_id = identity["organization_id"]
    if org_id is None:
        raise NoOrganizationError(message="You must be part of an organization to set goals")
    goals = _active_org_goals(db, org_id)
    if goals is None:
        goals = _create(db, organization_id=org_id, **values)
    else:
        for col, v in values.items():
            setattr(goals, col, v)
        db.commit()
    logger.info("organization goals updated org=%s by=%s", org_id, identity["id"])
    return project(goals)


def member_goals(db: Session, target: Identity) -> GoalsData:
    """Goals as the target member sees them."""
    return resolve(db, target)


__all__ = [
    "MEETINGS_PER_DAY",
    "MEETINGS_PER_WEEK",
    "GOAL_FIELDS",
    "GoalsData",
    "project",
    "default_goals_data",
    "resolve",
    "parse_goals_payload",
    "update",
    "member_goals",
]
