"""Registration and login.

Registration may found an organization (``organizationName``) or join an
existing one (``organizationId``). Passwords are hashed with werkzeug; tokens
are issued with the configured signing secret.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import ApiError, ValidationError, field_error, require_fields
from .identity import identity_of, identity_to_json
from .jwt_utils import issue_access_token, select_signing_secret
from .metrics import increment as metrics_increment
from .models import Organization, User
from .roles import DEFAULT_ROLE, is_role
from .validators import is_strong_password, is_valid_email

logger = logging.getLogger(__name__)


def normalize_email(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def user_json(user: User) -> dict[str, str | None]:
    return identity_to_json(identity_of(user))


def issue_token(user: User, cfg: Mapping[str, Any]) -> str:
    return issue_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        organization_id=user.organization_id,
        secret=select_signing_secret(cfg.get("JWT_SECRET"), cfg.get("JWT_SECRETS")),
        ttl=int(cfg.get("JWT_EXPIRES_IN", 604800)),
        issuer=cfg.get("JWT_ISSUER") or "salestrack",
        audience=cfg.get("JWT_AUDIENCE") or "api",
    )


def register(db: Session, payload: Any, cfg: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(payload, dict):
        payload = {}
    require_fields(payload, "firstName", "lastName")
    email = normalize_email(payload.get("email"))
    if not is_valid_email(email):
        raise ApiError("INVALID_EMAIL", "Invalid email format")
    password = payload.get("password")
    if not is_strong_password(password):
        raise ApiError(
            "WEAK_PASSWORD",
            "Password must be at least 8 characters with 1 uppercase letter and 1 number",
        )
    role = payload.get("role") or DEFAULT_ROLE
    if not is_role(role):
        raise ApiError("INVALID_ROLE", "Invalid role")
    if db.query(User).filter(User.email == email).first() is not None:
        raise ApiError("EMAIL_EXISTS", "Email already exists")

    org_id = payload.get("organizationId") or None
    org_name = payload.get("organizationName")
    if org_id is not None and not isinstance(org_id, str):
        raise ValidationError([field_error("organizationId", "organizationId must be a string")])
    if org_name is not None and not isinstance(org_name, str):
        raise ValidationError([field_error("organizationName", "organizationName must be a string")])
    org_name = (org_name or "").strip()

    if org_id is not None:
        if db.get(Organization, org_id) is None:
            raise ApiError("ORGANIZATION_NOT_FOUND", "Organization not found")
    elif org_name:
        if db.query(Organization).filter(Organization.name == org_name).first() is not None:
            raise ApiError("ORGANIZATION_EXISTS", "Organization name already exists")
        org = Organization(name=org_name)
        db.add(org)
        db.flush()
        org_id = org.id
        logger.info("organization created id=%s", org_id)

    user = User(
        email=email,
        password_hash=generate_password_hash(password),
        first_name=payload["firstName"].strip(),
        last_name=payload["lastName"].strip(),
        role=role,
        organization_id=org_id,
    )
    db.add(user)
    db.commit()
    logger.info("user registered id=%s role=%s org=%s", user.id, role, org_id)
    return {"token": issue_token(user, cfg), "user": user_json(user)}


def login(db: Session, payload: Any, cfg: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(payload, dict):
        payload = {}
    require_fields(payload, "email", "password")
    email = normalize_email(payload.get("email"))
    user = db.query(User).filter(User.email == email).first()
    # Same response for unknown email and wrong password; no lockout
    if user is None or not check_password_hash(user.password_hash, payload["password"]):
        metrics_increment("auth.login", {"outcome": "failure"})
        raise ApiError("INVALID_CREDENTIALS", "Invalid credentials")
    metrics_increment("auth.login", {"outcome": "success"})
    return {"token": issue_token(user, cfg), "user": user_json(user)}


__all__ = ["normalize_email", "user_json", "issue_token", "register", "login"]
