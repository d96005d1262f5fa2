import uuid

from conftest import make_app

from salestrack.jwt_utils import issue_access_token


def _token(user_id, secret="test-secret", ttl=3600, **kw):
    return issue_access_token(
        user_id=user_id,
        email="x@example.com",
        role="sales_rep",
        organization_id=None,
        secret=secret,
        ttl=ttl,
        **kw,
    )


def _code(r):
    return r.get_json()["error"]["code"]


def test_no_token(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert _code(r) == "NO_TOKEN"
    r = client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
    assert _code(r) == "NO_TOKEN"


def test_invalid_token(client, auth_headers):
    r = client.get("/api/auth/me", headers=auth_headers("garbage"))
    assert r.status_code == 401
    assert _code(r) == "INVALID_TOKEN"


def test_wrong_secret_is_invalid(client, register, auth_headers):
    _, user = register()
    r = client.get("/api/auth/me", headers=auth_headers(_token(user["id"], secret="nope")))
    assert _code(r) == "INVALID_TOKEN"


def test_non_ascii_signature_is_invalid(client, register, auth_headers):
    _, user = register()
    header, payload, _ = _token(user["id"]).split(".")
    r = client.get("/api/auth/me", headers=auth_headers(f"{header}.{payload}.\u00e9"))
    assert r.status_code == 401
    assert _code(r) == "INVALID_TOKEN"


def test_expired_token(client, register, auth_headers):
    _, user = register()
    r = client.get("/api/auth/me", headers=auth_headers(_token(user["id"], ttl=-30)))
    assert r.status_code == 401
    assert _code(r) == "TOKEN_EXPIRED"


def test_user_not_found(client, auth_headers):
    r = client.get("/api/auth/me", headers=auth_headers(_token(str(uuid.uuid4()))))
    assert r.status_code == 401
    assert _code(r) == "USER_NOT_FOUND"


def test_identity_is_reloaded_from_database(client, register, auth_headers):
    # Claims in the token are not trusted for role; the stored user is
    _, user = register(role="manager")
    forged = issue_access_token(
        user_id=user["id"],
        email=user["email"],
        role="admin",
        organization_id=None,
        secret="test-secret",
    )
    me = client.get("/api/auth/me", headers=auth_headers(forged)).get_json()["data"]
    assert me["role"] == "manager"


def test_rotated_secret_still_verifies(tmp_path, auth_headers):
    app = make_app(tmp_path, jwt_secret="new-secret", jwt_secrets=["new-secret", "old-secret"])
    client = app.test_client()
    r = client.post(
        "/api/auth/register",
        json={"email": "r@example.com", "password": "Passw0rd1", "firstName": "R", "lastName": "S"},
    )
    user = r.get_json()["data"]["user"]
    old = _token(user["id"], secret="old-secret")
    assert client.get("/api/auth/me", headers=auth_headers(old)).status_code == 200
