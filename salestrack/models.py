"""SQLAlchemy models for organizations, users, goals and weekly activity."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# System defaults for a freshly created goals record
DEFAULT_GOALS: dict[str, int] = {
    "calls_per_day": 25,
    "emails_per_day": 30,
    "contacts_per_day": 10,
    "responses_per_day": 5,
    "calls_per_week": 125,
    "emails_per_week": 150,
    "contacts_per_week": 50,
    "responses_per_week": 25,
}

WEEKDAYS: tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday")
ACTIVITY_METRICS: tuple[str, ...] = ("calls", "emails", "contacts", "responses")


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


# --- Tenancy & Users ---
class Organization(Base):
    __tablename__ = "organizations"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200), unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(200), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(20), default="sales_rep")  # sales_rep, manager, admin
    organization_id: Mapped[str | None] = mapped_column(
        ForeignKey("organizations.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


# --- Goals ---
class Goals(Base):
    """Either personal (user_id set) or organization-wide (organization_id set)."""

    __tablename__ = "goals"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    organization_id: Mapped[str | None] = mapped_column(
        ForeignKey("organizations.id"), nullable=True
    )
    calls_per_day: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["calls_per_day"])
    emails_per_day: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["emails_per_day"])
    contacts_per_day: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["contacts_per_day"])
    responses_per_day: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["responses_per_day"])
    calls_per_week: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["calls_per_week"])
    emails_per_week: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["emails_per_week"])
    contacts_per_week: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["contacts_per_week"])
    responses_per_week: Mapped[int] = mapped_column(Integer, default=DEFAULT_GOALS["responses_per_week"])
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    __table_args__ = (
        Index("ix_goals_org_active", "organization_id", "is_active"),
        Index("ix_goals_user_active", "user_id", "is_active"),
    )


# --- Weekly activity ---
class WeeklyActivity(Base):
    __tablename__ = "weekly_activity"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    # ISO YYYY-MM-DD; fixed width so string comparison orders chronologically
    week_start_date: Mapped[str] = mapped_column(String(10))
    monday_calls: Mapped[int] = mapped_column(Integer, default=0)
    monday_emails: Mapped[int] = mapped_column(Integer, default=0)
    monday_contacts: Mapped[int] = mapped_column(Integer, default=0)
    monday_responses: Mapped[int] = mapped_column(Integer, default=0)
    tuesday_calls: Mapped[int] = mapped_column(Integer, default=0)
    tuesday_emails: Mapped[int] = mapped_column(Integer, default=0)
    tuesday_contacts: Mapped[int] = mapped_column(Integer, default=0)
    tuesday_responses: Mapped[int] = mapped_column(Integer, default=0)
    wednesday_calls: Mapped[int] = mapped_column(Integer, default=0)
    wednesday_emails: Mapped[int] = mapped_column(Integer, default=0)
    wednesday_contacts: Mapped[int] = mapped_column(Integer, default=0)
    wednesday_responses: Mapped[int] = mapped_column(Integer, default=0)
    thursday_calls: Mapped[int] = mapped_column(Integer, default=0)
    thursday_emails: Mapped[int] = mapped_column(Integer, default=0)
    thursday_contacts: Mapped[int] = mapped_column(Integer, default=0)
    thursday_responses: Mapped[int] = mapped_column(Integer, default=0)
    friday_calls: Mapped[int] = mapped_column(Integer, default=0)
    friday_emails: Mapped[int] = mapped_column(Integer, default=0)
    friday_contacts: Mapped[int] = mapped_column(Integer, default=0)
    friday_responses: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, onupdate=_now)

    __table_args__ = (
        UniqueConstraint("user_id", "week_start_date", name="uq_weekly_activity_user_week"),
    )
