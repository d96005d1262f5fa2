from __future__ import annotations

import os
from dataclasses import dataclass, field


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    secret_key: str = "change-me"
    database_url: str = "sqlite:///dev.db"
    cors_allowed_origins: list[str] = field(default_factory=list)
    jwt_secret: str = "dev-secret"
    jwt_secrets: list[str] = field(default_factory=list)  # first element used for signing; all accepted for verification
    jwt_issuer: str = "salestrack"
    jwt_audience: str = "api"
    jwt_expires_in: int = 604800  # 7 days
    jwt_leeway_seconds: int = 0
    rate_limit_backend: str = "memory"
    redis_url: str | None = None
    rate_limit_prefix: str = "salestrack:rl:"
    rate_limit_window_seconds: int = 900
    rate_limit_max_requests: int = 100
    auth_rate_limit_window_seconds: int = 900
    auth_rate_limit_max_requests: int = 5
    rate_limits_json: str = ""
    log_level: str = "INFO"
    metrics_backend: str = "noop"
    # Tenancy policy switches (see DESIGN.md, open questions)
    same_org_null_match: bool = True
    unscoped_listing_without_org: bool = False

    @classmethod
    def from_env(cls) -> Config:
        cors = os.getenv("CORS_ALLOW_ORIGINS", "")
        jwt_multi = os.getenv("JWT_SECRETS", "")
        # JWT_SECRETS allows key rotation: comma-separated secrets; first used for signing.
        jwt_list = [s for s in [j.strip() for j in jwt_multi.split(",")] if s]
        # Windows are configured in milliseconds for parity with the deployed env files.
        window_ms = int(os.getenv("RATE_LIMIT_WINDOW_MS", "900000"))
        auth_window_ms = int(os.getenv("AUTH_RATE_LIMIT_WINDOW_MS", "900000"))
        return cls(
            secret_key=os.getenv("SECRET_KEY", "change-me"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///dev.db"),
            cors_allowed_origins=[o for o in [c.strip() for c in cors.split(",")] if o],
            jwt_secret=os.getenv("JWT_SECRET", "dev-secret"),
            jwt_secrets=jwt_list,
            jwt_issuer=os.getenv("JWT_ISSUER", "salestrack"),
            jwt_audience=os.getenv("JWT_AUDIENCE", "api"),
            jwt_expires_in=int(os.getenv("JWT_EXPIRES_IN", "604800")),
            jwt_leeway_seconds=int(os.getenv("JWT_LEEWAY_SECONDS", "0")),
            rate_limit_backend=(os.getenv("RATE_LIMIT_BACKEND", "memory").strip().lower() or "memory"),
            redis_url=os.getenv("REDIS_URL"),
            rate_limit_prefix=os.getenv("RATE_LIMIT_PREFIX", "salestrack:rl:"),
            rate_limit_window_seconds=max(1, window_ms // 1000),
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100")),
            auth_rate_limit_window_seconds=max(1, auth_window_ms // 1000),
            auth_rate_limit_max_requests=int(os.getenv("AUTH_RATE_LIMIT_MAX_REQUESTS", "5")),
            rate_limits_json=os.getenv("RATE_LIMITS_JSON", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            metrics_backend=os.getenv("METRICS_BACKEND", "noop").strip().lower(),
            same_org_null_match=_flag("SAME_ORG_NULL_MATCH", "1"),
            unscoped_listing_without_org=_flag("UNSCOPED_LISTING_WITHOUT_ORG", "0"),
        )

    def override(self, d: dict):
        for k, v in d.items():
            if hasattr(self, k):
                setattr(self, k, v)

    def to_flask_dict(self):
        return {
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "CORS_ALLOWED_ORIGINS": self.cors_allowed_origins,
            "JWT_SECRET": self.jwt_secret,
            "JWT_SECRETS": self.jwt_secrets,
            "JWT_ISSUER": self.jwt_issuer,
            "JWT_AUDIENCE": self.jwt_audience,
            "JWT_EXPIRES_IN": self.jwt_expires_in,
            "JWT_LEEWAY_SECONDS": self.jwt_leeway_seconds,
            "RATE_LIMIT_BACKEND": self.rate_limit_backend,
            "REDIS_URL": self.redis_url,
            "RATE_LIMIT_PREFIX": self.rate_limit_prefix,
            "RATE_LIMIT_WINDOW_SECONDS": self.rate_limit_window_seconds,
            "RATE_LIMIT_MAX_REQUESTS": self.rate_limit_max_requests,
            "AUTH_RATE_LIMIT_WINDOW_SECONDS": self.auth_rate_limit_window_seconds,
            "AUTH_RATE_LIMIT_MAX_REQUESTS": self.auth_rate_limit_max_requests,
            "RATE_LIMITS_JSON": self.rate_limits_json,
            "LOG_LEVEL": self.log_level,
            "METRICS_BACKEND": self.metrics_backend,
            "SAME_ORG_NULL_MATCH": self.same_org_null_match,
            "UNSCOPED_LISTING_WITHOUT_ORG": self.unscoped_listing_without_org,
            # Stateless API: no cookie session is issued, keep defaults hardened anyway
            "SESSION_COOKIE_HTTPONLY": True,
            "SESSION_COOKIE_SAMESITE": "Lax",
            "JSON_SORT_KEYS": False,
        }
