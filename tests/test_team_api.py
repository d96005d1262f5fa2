import uuid

from conftest import make_app

MONDAY = "2024-01-08"


def _code(r):
    return r.get_json()["error"]["code"]


def test_organizations_listing_is_public(client, register):
    register(role="manager", organization_name="Zeta")
    register(role="manager", organization_name="Alpha")
    r = client.get("/api/team/organizations")
    assert r.status_code == 200
    assert [o["name"] for o in r.get_json()["data"]] == ["Alpha", "Zeta"]


def test_members_excludes_caller_and_orders(client, register, auth_headers):
    token, mgr = register(role="manager", organization_name="Acme", first_name="Mia")
    org = mgr["organizationId"]
    register(role="sales_rep", organization_id=org, first_name="Bob")
    register(role="sales_rep", organization_id=org, first_name="Amy")
    register(role="admin", organization_id=org, first_name="Zed")
    register(role="sales_rep", organization_name="Other")
    data = client.get("/api/team/members", headers=auth_headers(token)).get_json()["data"]
    assert [(m["role"], m["firstName"]) for m in data] == [
        ("admin", "Zed"),
        ("sales_rep", "Amy"),
        ("sales_rep", "Bob"),
    ]
    assert mgr["id"] not in {m["id"] for m in data}


def test_members_forbidden_for_reps(client, org_team, auth_headers):
    r = client.get("/api/team/members", headers=auth_headers(org_team["rep_token"]))
    assert r.status_code == 403
    assert _code(r) == "FORBIDDEN"


def test_members_requires_organization(client, register, auth_headers):
    token, _ = register(role="manager")
    r = client.get("/api/team/members", headers=auth_headers(token))
    assert r.status_code == 400
    assert _code(r) == "NO_ORGANIZATION"


def test_cross_org_member_goals_forbidden(client, register, auth_headers):
    mgr_token, _ = register(role="admin", organization_name="O1")
    _, other = register(role="sales_rep", organization_name="O2")
    r = client.get(f"/api/team/member/{other['id']}/goals", headers=auth_headers(mgr_token))
    assert r.status_code == 403
    assert _code(r) == "FORBIDDEN"


def test_member_goals_are_the_members_effective_goals(client, org_team, auth_headers):
    h = auth_headers(org_team["manager_token"])
    r = client.get(f"/api/team/member/{org_team['rep']['id']}/goals", headers=h)
    assert r.status_code == 200
    own = client.get("/api/goals", headers=auth_headers(org_team["rep_token"])).get_json()["data"]
    assert r.get_json()["data"] == own


def test_unknown_member_is_not_found(client, org_team, auth_headers):
    r = client.get(f"/api/team/member/{uuid.uuid4()}/goals", headers=auth_headers(org_team["manager_token"]))
    assert r.status_code == 404
    assert _code(r) == "NOT_FOUND"


def test_manager_edits_member_week(client, org_team, auth_headers):
    h = auth_headers(org_team["manager_token"])
    rep_id = org_team["rep"]["id"]
    r = client.post(
        f"/api/team/member/{rep_id}/activity",
        json={"weekStartDate": MONDAY, "wednesday": {"contacts": 4}},
        headers=h,
    )
    assert r.status_code == 200, r.get_json()
    assert r.get_json()["message"] == "Team member activity updated successfully"
    data = client.get(f"/api/team/member/{rep_id}/activity/{MONDAY}", headers=h).get_json()["data"]
    assert data["userId"] == rep_id
    assert data["wednesday"]["contacts"] == 4
    # The rep sees the same week
    own = client.get(f"/api/activity/week/{MONDAY}", headers=auth_headers(org_team["rep_token"]))
    assert own.get_json()["data"]["wednesday"]["contacts"] == 4
    listing = client.get(f"/api/team/member/{rep_id}/activity", headers=h).get_json()["data"]
    assert [a["weekStartDate"] for a in listing] == [MONDAY]


def test_manager_member_week_validation(client, org_team, auth_headers):
    h = auth_headers(org_team["manager_token"])
    rep_id = org_team["rep"]["id"]
    r = client.post(f"/api/team/member/{rep_id}/activity", json={"weekStartDate": "2024-01-09"}, headers=h)
    assert _code(r) == "NOT_MONDAY"
    r = client.post(
        f"/api/team/member/{rep_id}/activity",
        json={"weekStartDate": MONDAY, "monday": {"calls": -3}},
        headers=h,
    )
    assert _code(r) == "INVALID_VALUE"
    r = client.get(f"/api/team/member/{rep_id}/activity/{MONDAY}", headers=h)
    assert r.get_json() == {"success": True, "message": "No data found for this week"}


def test_orgless_users_match_when_null_match_enabled(client, register, auth_headers):
    token, _ = register(role="manager")
    _, loner = register()
    r = client.get(f"/api/team/member/{loner['id']}/goals", headers=auth_headers(token))
    assert r.status_code == 200


def test_orgless_users_do_not_match_when_disabled(tmp_path, auth_headers):
    app = make_app(tmp_path, same_org_null_match=False)
    client = app.test_client()

    def reg(role):
        body = {
            "email": f"{uuid.uuid4().hex[:8]}@example.com",
            "password": "Passw0rd1",
            "firstName": "A",
            "lastName": "B",
            "role": role,
        }
        return client.post("/api/auth/register", json=body).get_json()["data"]

    mgr = reg("manager")
    loner = reg("sales_rep")
    r = client.get(f"/api/team/member/{loner['user']['id']}/goals", headers=auth_headers(mgr["token"]))
    assert r.status_code == 403
