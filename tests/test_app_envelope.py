import logging

from conftest import make_app
from sqlalchemy.exc import IntegrityError


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.get_json()
    assert body["success"] is True
    assert body["message"] == "Server is running"
    assert "timestamp" in body["data"]


def test_unknown_route_envelope(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.get_json() == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Route /api/nope not found"},
    }


def test_method_not_allowed(client):
    r = client.delete("/api/goals")
    assert r.status_code == 405
    assert r.get_json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_request_id_echoed_and_headers(client):
    r = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert r.headers["X-Request-Id"] == "abc-123"
    assert r.headers["Cache-Control"] == "no-store"
    assert int(r.headers["X-Request-Duration-ms"]) >= 0
    generated = client.get("/health").headers["X-Request-Id"]
    assert generated and generated != "abc-123"


def test_error_responses_carry_request_id(client):
    r = client.get("/api/goals", headers={"X-Request-Id": "rid-err"})
    assert r.status_code == 401
    assert r.headers["X-Request-Id"] == "rid-err"


def test_integrity_error_maps_to_duplicate_entry(tmp_path):
    app = make_app(tmp_path)

    @app.get("/boom/integrity")
    def _integrity():
        raise IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))

    r = app.test_client().get("/boom/integrity")
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "DUPLICATE_ENTRY"


def test_unhandled_exception_is_logged_and_hidden(tmp_path, caplog):
    app = make_app(tmp_path)

    @app.get("/boom/crash")
    def _crash():
        raise RuntimeError("secret internals")

    with caplog.at_level(logging.ERROR):
        r = app.test_client().get("/boom/crash")
    assert r.status_code == 500
    body = r.get_json()
    assert body["error"] == {"code": "INTERNAL_ERROR", "message": "Internal server error"}
    assert "secret internals" not in r.get_data(as_text=True)
    assert any("Unhandled exception" in rec.getMessage() for rec in caplog.records)


def test_access_log_line(client, caplog):
    with caplog.at_level(logging.INFO, logger="salestrack.access"):
        client.get("/health", headers={"X-Request-Id": "log-1"})
    lines = [rec for rec in caplog.records if rec.name == "salestrack.access"]
    assert lines
    assert lines[-1].msg["request_id"] == "log-1"
    assert lines[-1].msg["status"] == 200


def test_cors_allow_list(tmp_path):
    app = make_app(tmp_path, cors_allowed_origins=["https://app.example"])
    client = app.test_client()
    r = client.get("/health", headers={"Origin": "https://app.example"})
    assert r.headers["Access-Control-Allow-Origin"] == "https://app.example"
    r = client.get("/health", headers={"Origin": "https://evil.example"})
    assert "Access-Control-Allow-Origin" not in r.headers
    pre = client.options(
        "/api/goals",
        headers={"Origin": "https://app.example", "Access-Control-Request-Method": "PUT"},
    )
    assert pre.status_code == 204
