VALID = {
    "callsPerDay": 40,
    "emailsPerDay": 20,
    "contactsPerDay": 8,
    "responsesPerDay": 4,
    "callsPerWeek": 200,
    "emailsPerWeek": 100,
    "contactsPerWeek": 40,
    "responsesPerWeek": 20,
}


def test_get_goals_requires_token(client):
    r = client.get("/api/goals")
    assert r.status_code == 401
    assert r.get_json()["error"]["code"] == "NO_TOKEN"


def test_rep_sees_org_goals_set_by_manager(client, org_team, auth_headers):
    r = client.put("/api/goals", json=VALID, headers=auth_headers(org_team["manager_token"]))
    assert r.status_code == 200, r.get_json()
    body = r.get_json()
    assert body["success"] is True
    assert body["message"].startswith("Organization goals updated successfully")
    r = client.get("/api/goals", headers=auth_headers(org_team["rep_token"]))
    data = r.get_json()["data"]
    assert data["callsPerDay"] == 40
    assert data["meetingsPerDay"] == 2


def test_rep_cannot_update_goals(client, org_team, auth_headers):
    r = client.put("/api/goals", json=VALID, headers=auth_headers(org_team["rep_token"]))
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "FORBIDDEN"


def test_invalid_metrics(client, org_team, auth_headers):
    r = client.put(
        "/api/goals",
        json={**VALID, "callsPerDay": -5},
        headers=auth_headers(org_team["manager_token"]),
    )
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "INVALID_METRICS"


def test_validation_error_details(client, org_team, auth_headers):
    r = client.put("/api/goals", json={"callsPerDay": 3}, headers=auth_headers(org_team["manager_token"]))
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert len(err["details"]) == 7


def test_manager_without_org_cannot_update(client, register, auth_headers):
    token, _ = register(role="manager")
    r = client.put("/api/goals", json=VALID, headers=auth_headers(token))
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "NO_ORGANIZATION"


def test_orgless_rep_gets_defaults(client, register, auth_headers):
    token, _ = register()
    data = client.get("/api/goals", headers=auth_headers(token)).get_json()["data"]
    assert data == {
        "callsPerDay": 25,
        "emailsPerDay": 30,
        "contactsPerDay": 10,
        "responsesPerDay": 5,
        "meetingsPerDay": 2,
        "callsPerWeek": 125,
        "emailsPerWeek": 150,
        "contactsPerWeek": 50,
        "responsesPerWeek": 25,
        "meetingsPerWeek": 10,
    }


def test_goal_value_too_large_is_rejected(client, org_team, auth_headers):
    r = client.put(
        "/api/goals",
        json={**VALID, "callsPerDay": 10**20},
        headers=auth_headers(org_team["manager_token"]),
    )
    assert r.status_code == 400
    err = r.get_json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in err["details"]] == ["callsPerDay"]
