"""Bearer-token authentication.

Each request authenticates independently: the token is verified, its subject
is re-read from the database and the resulting projection is stored on
``flask.g.identity``. Nothing is written during authentication.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypedDict, TypeVar

from flask import current_app, g, request

from .db import get_session
from .errors import ApiError
from .jwt_utils import JWTError, TokenExpiredError, decode as jwt_decode
from .models import User

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class Identity(TypedDict):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    organization_id: str | None


class AuthenticationError(ApiError):
    """Signals a 401; ``code`` tells the client why."""

    code = "UNAUTHORIZED"
    default_message = "Authentication required"


_MESSAGES = {
    "NO_TOKEN": "No token provided",
    "INVALID_TOKEN": "Invalid token",
    "TOKEN_EXPIRED": "Token expired",
    "AUTH_ERROR": "Authentication failed",
    "USER_NOT_FOUND": "User not found",
}


def _fail(code: str) -> AuthenticationError:
    return AuthenticationError(code, _MESSAGES[code])


def _bearer_token() -> str | None:
    parts = request.headers.get("Authorization", "").split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def identity_of(user: User) -> Identity:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "organization_id": user.organization_id,
    }


def identity_to_json(identity: Identity) -> dict[str, str | None]:
    return {
        "id": identity["id"],
        "email": identity["email"],
        "firstName": identity["first_name"],
        "lastName": identity["last_name"],
        "role": identity["role"],
        "organizationId": identity["organization_id"],
    }


def authenticate() -> Identity:
    """Verify the bearer token and resolve the current user.

    Raises AuthenticationError with NO_TOKEN, INVALID_TOKEN, TOKEN_EXPIRED,
    AUTH_ERROR or USER_NOT_FOUND.
    """
    cached = g.get("identity")
    if cached is not None:
        return cached
    token = _bearer_token()
    if token is None:
        raise _fail("NO_TOKEN")
    cfg = current_app.config
    try:
        payload = jwt_decode(
            token,
            secret=cfg.get("JWT_SECRET"),
            secrets_list=cfg.get("JWT_SECRETS") or [],
            issuer=cfg.get("JWT_ISSUER"),
            audience=cfg.get("JWT_AUDIENCE"),
            leeway=cfg.get("JWT_LEEWAY_SECONDS", 0),
        )
    except TokenExpiredError as e:
        raise _fail("TOKEN_EXPIRED") from e
    except JWTError as e:
        logger.debug("jwt rejected: %s", e)
        raise _fail("INVALID_TOKEN") from e
    except Exception as e:
        logger.warning("token verification failed: %s", e)
        raise _fail("AUTH_ERROR") from e
    user = get_session().get(User, payload["sub"])
    if user is None:
        raise _fail("USER_NOT_FOUND")
    ident = identity_of(user)
    g.identity = ident
    return ident


def current_identity() -> Identity:
    return authenticate()


def authenticated(fn: Callable[P, R]) -> Callable[P, R]:
    @wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        authenticate()
        return fn(*args, **kwargs)

    return wrapper


__all__ = [
    "Identity",
    "AuthenticationError",
    "identity_of",
    "identity_to_json",
    "authenticate",
    "current_identity",
    "authenticated",
]
