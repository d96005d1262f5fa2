"""JWT utilities

HS256 only. Issued access tokens carry the user id (``sub``), email, role and
organization id. Verification order: structure, alg, signature (any of the
rotation secrets), payload claims, then expiry/issuer/audience. A token with a
bad signature is therefore never reported as expired.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
import time
from typing import Any, TypedDict

from . import metrics as metrics_mod


class JWTError(Exception):
    pass


class TokenExpiredError(JWTError):
    pass


def _inc_jwt_rejected(reason: str) -> None:
    metrics_mod.increment("auth.token_rejected", {"reason": reason})


DEFAULT_ACCESS_TTL = 604800  # 7 days
ALG_HS256 = "HS256"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + pad)


def _sign(msg: bytes, secret: str) -> str:
    sig = hmac.new(secret.encode(), msg, hashlib.sha256).digest()
    return _b64url(sig)


def generate_jti() -> str:
    return secrets.token_hex(16)


def encode(payload: dict[str, Any], *, secret: str, ttl: int) -> str:
    now = int(time.time())
    header = {"alg": ALG_HS256, "typ": "JWT"}
    pl = payload.copy()
    pl.setdefault("iat", now)
    pl.setdefault("exp", now + ttl)
    header_b = _b64url(json.dumps(header, separators=(",", ":")).encode())
    payload_b = _b64url(json.dumps(pl, separators=(",", ":")).encode())
    msg = f"{header_b}.{payload_b}".encode()
    return f"{header_b}.{payload_b}.{_sign(msg, secret)}"


class AccessTokenPayload(TypedDict):
    sub: str
    email: str
    role: str
    organization_id: str | None
    jti: str
    iat: int
    exp: int
    iss: str


def decode(
    token: str,
    *,
    secret: str | None = None,
    secrets_list: list[str] | None = None,
    issuer: str | None = None,
    audience: str | None = None,
    leeway: int = 0,
) -> AccessTokenPayload:
    try:
        header_b, payload_b, sig = token.split(".")
    except ValueError as e:
        _inc_jwt_rejected("malformed")
        raise JWTError("malformed token") from e
    msg = f"{header_b}.{payload_b}".encode()
    try:
        header_raw = json.loads(_b64url_decode(header_b))
    except ValueError as e:
        _inc_jwt_rejected("bad_header")
        raise JWTError("bad header") from e
    if not isinstance(header_raw, dict) or header_raw.get("alg") != ALG_HS256:
        _inc_jwt_rejected("alg")
        raise JWTError("alg")
    secrets_to_try: list[str] = []
    if secret:
        secrets_to_try.append(secret)
    for s in secrets_list or []:
        if s and s not in secrets_to_try:
            secrets_to_try.append(s)
    for sec in secrets_to_try:
        if hmac.compare_digest(_sign(msg, sec).encode(), sig.encode("utf-8", "replace")):
            break
    else:
        _inc_jwt_rejected("bad_signature")
        raise JWTError("bad signature")
    try:
        raw = json.loads(_b64url_decode(payload_b))
    except ValueError as e:
        _inc_jwt_rejected("bad_payload")
        raise JWTError("bad payload") from e
    if not isinstance(raw, dict):
        _inc_jwt_rejected("bad_payload")
        raise JWTError("bad payload type")

    def _req(key: str, t: type) -> Any:
        if key not in raw:
            _inc_jwt_rejected(key)
            raise JWTError(f"missing claim {key}")
        val = raw[key]
        # bool is an int subclass; never accept it for numeric claims
        if not isinstance(val, t) or isinstance(val, bool):
            _inc_jwt_rejected(key)
            raise JWTError(f"bad claim type {key}")
        return val

    sub = _req("sub", str)
    email = _req("email", str)
    role = _req("role", str)
    jti = _req("jti", str)
    iat = _req("iat", int)
    exp = _req("exp", int)
    org = raw.get("organization_id")
    if org is not None and not isinstance(org, str):
        _inc_jwt_rejected("organization_id")
        raise JWTError("bad claim type organization_id")
    iss_val = raw.get("iss", "")
    now = int(time.time())
    if now > exp + leeway:
        _inc_jwt_rejected("exp")
        raise TokenExpiredError("token expired")
    if iat > now + leeway:
        _inc_jwt_rejected("iat_future")
        raise JWTError("iat_future")
    if issuer and iss_val != issuer:
        _inc_jwt_rejected("iss")
        raise JWTError("iss")
    if audience:
        aud_val = raw.get("aud")
        ok = aud_val == audience or (isinstance(aud_val, list) and audience in aud_val)
        if not ok:
            _inc_jwt_rejected("aud")
            raise JWTError("aud")
    return AccessTokenPayload(
        sub=sub, email=email, role=role, organization_id=org, jti=jti, iat=iat, exp=exp, iss=iss_val
    )


def issue_access_token(
    *,
    user_id: str,
    email: str,
    role: str,
    organization_id: str | None,
    secret: str,
    ttl: int = DEFAULT_ACCESS_TTL,
    issuer: str = "salestrack",
    audience: str = "api",
) -> str:
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "role": role,
        "organization_id": organization_id,
        "jti": generate_jti(),
        "iss": issuer,
        "aud": audience,
        "iat": now,
        "exp": now + ttl,
    }
    return encode(payload, secret=secret, ttl=ttl)


def select_signing_secret(primary: str | None, candidates: list[str] | None) -> str:
    """Return first rotation candidate if any, else the primary secret; raise if none.

    JWT_SECRETS lists the signing secret first while previous secrets are still
    accepted for verification.
    """
    for c in candidates or []:
        if c:
            return c
    if primary:
        return primary
    raise JWTError("no signing secret available")
