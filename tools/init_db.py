"""Apply Alembic migrations and optionally seed a demo organization.

Usage: python tools/init_db.py [--seed]
"""
from __future__ import annotations

import argparse
import os
import sys
from typing import NoReturn

from alembic import command
from alembic.config import Config as AlembicConfig
from werkzeug.security import generate_password_hash

# Ensure project root on path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from salestrack.db import get_session, init_engine  # noqa: E402
from salestrack.models import Organization, User  # noqa: E402

DEMO_ORG = "Demo Sales"
DEMO_MANAGER = "manager@demo.example"


def run_migrations(database_url: str) -> None:
    acfg = AlembicConfig(os.path.join(ROOT, "alembic.ini"))
    acfg.set_main_option("script_location", os.path.join(ROOT, "migrations"))
    # Pass URL via env override supported by migrations/env.py
    os.environ.setdefault("DATABASE_URL", database_url)
    command.upgrade(acfg, "head")


def seed_demo(password: str) -> None:
    """Create the demo organization and one manager if not present."""
    db = get_session()
    try:
        org = db.query(Organization).filter(Organization.name == DEMO_ORG).first()
        if org is None:
            org = Organization(name=DEMO_ORG)
            db.add(org)
            db.flush()
        if db.query(User).filter(User.email == DEMO_MANAGER).first() is None:
            db.add(
                User(
                    email=DEMO_MANAGER,
                    password_hash=generate_password_hash(password),
                    first_name="Demo",
                    last_name="Manager",
                    role="manager",
                    organization_id=org.id,
                )
            )
        db.commit()
        print(f"Seeded organization id={org.id} with manager {DEMO_MANAGER}")
    finally:
        db.close()


def main() -> NoReturn:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", action="store_true", help="create a demo organization and manager")
    args = parser.parse_args()
    url = os.environ.get("DATABASE_URL", "sqlite:///dev.db")
    print(f"Using DATABASE_URL={url}")
    init_engine(url, force=True)
    run_migrations(url)
    if args.seed:
        seed_demo(os.environ.get("DEMO_PASSWORD", "Demo12345"))
    print("Done.")
    raise SystemExit(0)


if __name__ == "__main__":
    main()
