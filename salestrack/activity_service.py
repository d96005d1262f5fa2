"""Weekly activity records: one row per (user, Monday), upserted whole."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from .errors import ApiError, ValidationError, field_error
from .models import ACTIVITY_METRICS, WEEKDAYS, WeeklyActivity
from .validators import MAX_COUNTER, is_int, optional_date_param, parse_week_start

logger = logging.getLogger(__name__)


def serialize(activity: WeeklyActivity, *, include_ids: bool = False) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if include_ids:
        out["id"] = activity.id
        out["userId"] = activity.user_id
    out["weekStartDate"] = activity.week_start_date
    for day in WEEKDAYS:
        out[day] = {m: getattr(activity, f"{day}_{m}") for m in ACTIVITY_METRICS}
    return out


def _counters(payload: dict[str, Any]) -> dict[str, int]:
    """Flatten the per-day groups into column values, missing -> 0."""
    details = []
    values: dict[str, int] = {}
    for day in WEEKDAYS:
        group = payload.get(day)
        if group is None:
            group = {}
        if not isinstance(group, dict):
            details.append(field_error(day, f"{day} must be an object"))
            continue
        for m in ACTIVITY_METRICS:
            v = group.get(m)
            if v is None:
                v = 0
            if not is_int(v):
                details.append(field_error(f"{day}.{m}", f"{day}.{m} must be an integer"))
                continue
            if v > MAX_COUNTER:
                details.append(field_error(f"{day}.{m}", f"{day}.{m} must be at most {MAX_COUNTER}"))
                continue
            values[f"{day}_{m}"] = v
    if details:
        raise ValidationError(details)
    if any(v < 0 for v in values.values()):
        raise ApiError("INVALID_VALUE", "All activity values must be non-negative")
    return values


def _find(db: Session, user_id: str, week_start_date: str) -> WeeklyActivity | None:
    return (
        db.query(WeeklyActivity)
        .filter(WeeklyActivity.user_id == user_id, WeeklyActivity.week_start_date == week_start_date)
        .first()
    )


def get_week(db: Session, user_id: str, week_start_date: str) -> WeeklyActivity | None:
    week = parse_week_start(week_start_date)
    return _find(db, user_id, week)


def save_week(db: Session, user_id: str, week_start_date: Any, payload: dict[str, Any] | None) -> WeeklyActivity:
    """Validate, then create or fully replace the record for that week."""
    week = parse_week_start(week_start_date)
    values = _counters(payload or {})
    row = _find(db, user_id, week)
    if row is None:
        row = WeeklyActivity(user_id=user_id, week_start_date=week, **values)
        db.add(row)
    else:
        for col, v in values.items():
            setattr(row, col, v)
    db.commit()
    logger.info("weekly activity saved user=%s week=%s", user_id, week)
    return row


def list_all(db: Session, user_id: str, start_date: str | None = None, end_date: str | None = None) -> list[WeeklyActivity]:
    start = optional_date_param(start_date, "startDate")
    end = optional_date_param(end_date, "endDate")
    q = db.query(WeeklyActivity).filter(WeeklyActivity.user_id == user_id)
    # Fixed-width ISO strings compare chronologically
    if start is not None:
        q = q.filter(WeeklyActivity.week_start_date >= start)
    if end is not None:
        q = q.filter(WeeklyActivity.week_start_date <= end)
    return q.order_by(WeeklyActivity.week_start_date.desc()).all()


__all__ = ["serialize", "get_week", "save_week", "list_all"]
