"""Initial schema: organizations, users, goals, weekly_activity

Revision ID: 0001_init
Revises:
Create Date: 2026-10-17
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")
METRICS = ("calls", "emails", "contacts", "responses")

GOAL_DEFAULTS = (
    ("calls_per_day", 25),
    ("emails_per_day", 30),
    ("contacts_per_day", 10),
    ("responses_per_day", 5),
    ("calls_per_week", 125),
    ("emails_per_week", 150),
    ("contacts_per_week", 50),
    ("responses_per_week", 25),
)


def upgrade() -> None:
    conn = op.get_bind()
    dialect = conn.dialect.name if conn is not None else "sqlite"
    true_def = sa.text("TRUE") if dialect == "postgresql" else sa.text("1")
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=200), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="sales_rep"),
        sa.Column("organization_id", sa.String(length=36), sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_organization_id", "users", ["organization_id"])
    op.create_table(
        "goals",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("organization_id", sa.String(length=36), sa.ForeignKey("organizations.id"), nullable=True),
        *[
            sa.Column(name, sa.Integer(), nullable=False, server_default=str(default))
            for name, default in GOAL_DEFAULTS
        ],
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=true_def),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_goals_org_active", "goals", ["organization_id", "is_active"])
    op.create_index("ix_goals_user_active", "goals", ["user_id", "is_active"])
    op.create_table(
        "weekly_activity",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("week_start_date", sa.String(length=10), nullable=False),
        *[
            sa.Column(f"{day}_{metric}", sa.Integer(), nullable=False, server_default="0")
            for day in WEEKDAYS
            for metric in METRICS
        ],
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "week_start_date", name="uq_weekly_activity_user_week"),
    )


def downgrade() -> None:
    op.drop_table("weekly_activity")
    op.drop_index("ix_goals_user_active", table_name="goals")
    op.drop_index("ix_goals_org_active", table_name="goals")
    op.drop_table("goals")
    op.drop_index("ix_users_organization_id", table_name="users")
    op.drop_table("users")
    op.drop_table("organizations")
