"""Input validation helpers shared by the services."""

from __future__ import annotations

import re
import uuid
from datetime import date

from .errors import ApiError, ValidationError, field_error

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_email(value: object) -> bool:
    return isinstance(value, str) and EMAIL_RE.match(value) is not None


def is_strong_password(value: object) -> bool:
    # min 8 chars, one uppercase letter, one digit
    if not isinstance(value, str) or len(value) < 8:
        return False
    return re.search(r"[A-Z]", value) is not None and re.search(r"[0-9]", value) is not None


# Upper bound of the Integer counter columns
MAX_COUNTER = 2**31 - 1


def is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def parse_date(value: object) -> date | None:
    """Strict ``YYYY-MM-DD`` that also names a real calendar day."""
    if not isinstance(value, str) or DATE_RE.match(value) is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_week_start(value: object) -> str:
    """Validate a week key; returns it unchanged.

    INVALID_DATE for malformed or impossible dates, NOT_MONDAY otherwise.
    """
    parsed = parse_date(value)
    if parsed is None:
        raise ApiError("INVALID_DATE", "Invalid date format. Use YYYY-MM-DD")
    if parsed.weekday() != 0:
        raise ApiError("NOT_MONDAY", "Week start date must be a Monday")
    return value  # type: ignore[return-value]


def require_uuid(value: str, field: str = "id") -> str:
    if not is_uuid(value):
        raise ValidationError([field_error(field, "Invalid user ID")])
    return value


def optional_date_param(value: str | None, field: str) -> str | None:
    if value is None or value == "":
        return None
    if parse_date(value) is None:
        raise ValidationError([field_error(field, f"{field} must be a valid date (YYYY-MM-DD)")])
    return value


__all__ = [
    "EMAIL_RE",
    "DATE_RE",
    "is_valid_email",
    "is_strong_password",
    "MAX_COUNTER",
    "is_int",
    "is_uuid",
    "parse_date",
    "parse_week_start",
    "require_uuid",
    "optional_date_param",
]
