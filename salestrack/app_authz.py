"""Authorization helpers.

Role checks run as view decorators (``require_roles``); organization checks
are plain functions called from the views once the target id is known. All
failures raise ``ApiError`` subclasses rendered by the central handlers.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from flask import current_app
from sqlalchemy.orm import Session

from .errors import ApiError, NoOrganizationError, NotFoundError
from .identity import Identity, authenticate
from .models import User
from .roles import Role

P = ParamSpec("P")
R = TypeVar("R")


class AuthzError(ApiError):
    """Signals an authorization (403) failure."""

    code = "FORBIDDEN"
    default_message = "Insufficient permissions"

    required: tuple[str, ...]

    def __init__(self, message: str | None = None, required: tuple[str, ...] = ()):
        super().__init__(None, message)
        self.required = required


def require_roles(*roles: Role) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Authenticate, then allow only callers whose role is in ``roles``."""
    allowed = tuple(roles)

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            ident = authenticate()
            if allowed and ident["role"] not in allowed:
                current_app.logger.info(
                    {"authz": "role_denied", "expected_any_of": allowed, "role": ident["role"]}
                )
                raise AuthzError(required=allowed)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def _same_org(a: str | None, b: str | None) -> bool:
    if a is None and b is None:
        return bool(current_app.config.get("SAME_ORG_NULL_MATCH", True))
    return a == b


def require_same_organization(db: Session, identity: Identity, target_user_id: str) -> User:
    """Load the target user and require it to share the caller's organization."""
    target = db.get(User, target_user_id)
    if target is None:
        raise NotFoundError(message="User not found")
    if not _same_org(identity["organization_id"], target.organization_id):
        raise AuthzError("Access denied: user is not in your organization")
    return target


def organization_scope(identity: Identity) -> str | None:
    """Organization id listings must be filtered by; None means unscoped.

    Callers without an organization are denied unless
    UNSCOPED_LISTING_WITHOUT_ORG is enabled.
    """
    org = identity["organization_id"]
    if org is not None:
        return org
    if current_app.config.get("UNSCOPED_LISTING_WITHOUT_ORG", False):
        return None
    raise NoOrganizationError()


def scoped_user(db: Session, identity: Identity, target_user_id: str) -> User:
    """Target user visible under ``organization_scope`` of the caller."""
    scope = organization_scope(identity)
    target = db.get(User, target_user_id)
    if target is None:
        raise NotFoundError(message="User not found")
    if scope is not None and target.organization_id != scope:
        raise AuthzError("Access denied: user is not in your organization")
    return target


__all__ = [
    "AuthzError",
    "require_roles",
    "require_same_organization",
    "organization_scope",
    "scoped_user",
]
