import os
import sys
import uuid

import pytest

# Path setup before any project imports to satisfy E402
ROOT = os.path.dirname(__file__)
PARENT = os.path.abspath(os.path.join(ROOT, ".."))
if PARENT not in sys.path:  # pragma: no cover - environment dependent
    sys.path.insert(0, PARENT)

PASSWORD = "Passw0rd1"

# Generous limits so ordinary API tests never trip the limiter; the rate limit
# tests build their own app with small quotas.
BASE_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test",
    "jwt_secret": "test-secret",
    "jwt_secrets": [],
    "jwt_issuer": "salestrack",
    "jwt_audience": "api",
    "jwt_leeway_seconds": 0,
    "rate_limit_backend": "memory",
    "rate_limit_max_requests": 10000,
    "auth_rate_limit_max_requests": 10000,
    "rate_limits_json": "",
    "metrics_backend": "noop",
    "same_org_null_match": True,
    "unscoped_listing_without_org": False,
    "cors_allowed_origins": [],
}


def make_app(tmp_path, **overrides):
    from salestrack.app_factory import create_app
    from salestrack.db import create_all

    tmp_path.mkdir(parents=True, exist_ok=True)
    cfg = dict(BASE_CONFIG)
    cfg["database_url"] = f"sqlite:///{tmp_path / 'test.db'}"
    cfg.update(overrides)
    app = create_app(cfg)
    create_all()
    return app


@pytest.fixture
def app(tmp_path):
    return make_app(tmp_path)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    from salestrack.db import get_session, remove_session

    sess = get_session()
    yield sess
    remove_session()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer


@pytest.fixture
def register(client):
    """Register a user through the API; returns (token, user json)."""

    def _register(
        role: str = "sales_rep",
        organization_name: str | None = None,
        organization_id: str | None = None,
        email: str | None = None,
        first_name: str = "Test",
    ):
        body = {
            "email": email or f"u_{uuid.uuid4().hex[:8]}@example.com",
            "password": PASSWORD,
            "firstName": first_name,
            "lastName": "User",
            "role": role,
        }
        if organization_name is not None:
            body["organizationName"] = organization_name
        if organization_id is not None:
            body["organizationId"] = organization_id
        r = client.post("/api/auth/register", json=body)
        assert r.status_code == 201, r.get_json()
        data = r.get_json()["data"]
        return data["token"], data["user"]

    return _register


@pytest.fixture
def org_team(register):
    """Manager founding an organization plus one rep in it."""
    org_name = f"Org {uuid.uuid4().hex[:6]}"
    mgr_token, mgr = register(role="manager", organization_name=org_name)
    rep_token, rep = register(role="sales_rep", organization_id=mgr["organizationId"])
    return {
        "org_id": mgr["organizationId"],
        "manager_token": mgr_token,
        "manager": mgr,
        "rep_token": rep_token,
        "rep": rep,
    }
