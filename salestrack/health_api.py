from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint
from flask.typing import ResponseReturnValue

from .responses import success

bp = Blueprint("health_api", __name__)


@bp.get("/health")
def health() -> ResponseReturnValue:
    # Liveness only; no database round-trip
    return success({"timestamp": datetime.now(UTC).isoformat()}, "Server is running")
