import pytest

from salestrack.errors import ApiError, ValidationError
from salestrack.validators import (
    is_int,
    is_strong_password,
    is_uuid,
    is_valid_email,
    optional_date_param,
    parse_week_start,
)


@pytest.mark.parametrize("value", ["2024-01-01", "2024-12-30", "2025-03-03"])
def test_mondays_accepted(value):
    assert parse_week_start(value) == value


@pytest.mark.parametrize("value", ["2024-1-01", "01-01-2024", "2024-02-30", "2024-13-01", "", None, 20240101])
def test_invalid_dates(value):
    with pytest.raises(ApiError) as ei:
        parse_week_start(value)
    assert ei.value.code == "INVALID_DATE"


@pytest.mark.parametrize("value", ["2024-01-02", "2024-01-06", "2024-01-07"])
def test_non_mondays(value):
    with pytest.raises(ApiError) as ei:
        parse_week_start(value)
    assert ei.value.code == "NOT_MONDAY"


def test_password_strength():
    assert is_strong_password("Passw0rd1")
    assert not is_strong_password("password1")  # no uppercase
    assert not is_strong_password("Password")  # no digit
    assert not is_strong_password("Pa1")  # too short
    assert not is_strong_password(None)


def test_email_format():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert not is_valid_email("a b@c.de")
    assert not is_valid_email(None)


def test_is_int_excludes_bool_and_float():
    assert is_int(0) and is_int(7)
    assert not is_int(True)
    assert not is_int(1.5)
    assert not is_int("3")


def test_uuid_check():
    assert is_uuid("0b7a3f4e-2a57-4a1b-9c8e-6f7d5c4b3a21")
    assert not is_uuid("123")


def test_optional_date_param():
    assert optional_date_param(None, "startDate") is None
    assert optional_date_param("2024-01-01", "startDate") == "2024-01-01"
    with pytest.raises(ValidationError) as ei:
        optional_date_param("yesterday", "startDate")
    assert ei.value.details[0]["field"] == "startDate"
