from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from dotenv import load_dotenv
from flask import Flask, g, request
from werkzeug.wrappers.response import Response

from . import limit_registry
from .activity_api import bp as activity_bp
from .auth import bp as auth_bp
from .config import Config
from .db import init_engine, remove_session
from .errors import register_error_handlers
from .goals_api import bp as goals_bp
from .health_api import bp as health_bp
from .http_limits import enforce as enforce_limit
from .logging_setup import ACCESS_LOGGER, configure_logging
from .metrics import reset_metrics, set_metrics
from .metrics_logging import LoggingMetrics
from .rate_limiter import init_rate_limiter
from .security import init_security
from .team_api import bp as team_bp
from .users_api import bp as users_bp


def create_app(config_override: dict[str, Any] | None = None) -> Flask:
    load_dotenv()
    app = Flask(__name__)
    # --- Configuration ---
    cfg = Config.from_env()
    if config_override:
        known = {k: v for k, v in config_override.items() if hasattr(cfg, k)}
        if known:
            cfg.override(known)
    app.config.update(cfg.to_flask_dict())
    if config_override:
        for k, v in config_override.items():  # also allow direct Flask config keys
            if k.isupper():
                app.config[k] = v
    app.json.sort_keys = False  # type: ignore[attr-defined]

    # --- Logging ---
    configure_logging(cfg.log_level)
    access_log = logging.getLogger(ACCESS_LOGGER)

    # --- DB setup ---
    force = bool(config_override and ("database_url" in config_override or config_override.get("FORCE_DB_REINIT")))
    init_engine(cfg.database_url, force=force)
    app.teardown_appcontext(remove_session)

    # --- Metrics backend wiring ---
    if cfg.metrics_backend == "log":
        set_metrics(LoggingMetrics())
        app.logger.info("Metrics backend initialized: log")
    else:
        reset_metrics()

    # --- Rate limiting ---
    init_rate_limiter(cfg.rate_limit_backend, cfg.redis_url, cfg.rate_limit_prefix)
    limit_registry.configure(
        {
            "api": {"quota": cfg.rate_limit_max_requests, "per_seconds": cfg.rate_limit_window_seconds},
            "auth": {
                "quota": cfg.auth_rate_limit_max_requests,
                "per_seconds": cfg.auth_rate_limit_window_seconds,
            },
        },
        cfg.rate_limits_json or None,
    )

    # --- Request id / timing ---
    @app.before_request
    def _before_req() -> None:
        g._t0 = time.perf_counter()
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())

    # --- Security middleware (CORS, headers) ---
    init_security(app)

    @app.before_request
    def _api_rate_limit() -> None:
        if request.path.startswith("/api/") and request.method != "OPTIONS":
            enforce_limit("api")

    @app.after_request
    def _after_req(resp: Response) -> Response:
        dur_ms = int((time.perf_counter() - getattr(g, "_t0", time.perf_counter())) * 1000)
        rid = getattr(g, "request_id", None) or str(uuid.uuid4())
        resp.headers["X-Request-Id"] = rid
        resp.headers["X-Request-Duration-ms"] = str(dur_ms)
        if "Cache-Control" not in resp.headers:
            resp.headers["Cache-Control"] = "no-store"
        ident = g.get("identity")
        access_log.info(
            {
                "request_id": rid,
                "user_id": ident["id"] if ident else None,
                "organization_id": ident["organization_id"] if ident else None,
                "method": request.method,
                "path": request.path,
                "status": resp.status_code,
                "duration_ms": dur_ms,
            }
        )
        return resp

    # --- Errors ---
    register_error_handlers(app)

    # --- Blueprints ---
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(goals_bp)
    app.register_blueprint(activity_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(team_bp)

    return app


__all__ = ["create_app"]
