from warehouse_service.app.models.issues.issues import Issue, IssueActivity

from conftest import auth_headers


def report_issue(client, user, warehouse=None, **fields):
    payload = {"title": "Leaking roof", "description": "Water over aisle 3",
               "category": "safety", "priority": "high", **fields}
    if warehouse is not None:
        payload["warehouse_id"] = str(warehouse.id)
    resp = client.post("/api/issues", headers=auth_headers(user), json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def close(client, user, issue_id, notes="Patched the roof"):
    return client.patch(f"/api/issues/{issue_id}/close", headers=auth_headers(user),
                        json={"resolution_notes": notes})


def activity_actions(client, user, issue_id):
    resp = client.get(f"/api/issues/{issue_id}/activities", headers=auth_headers(user))
    assert resp.status_code == 200, resp.text
    return [a["action"] for a in resp.json()["data"]]


def test_new_issue_is_open_and_logged(client, db, employee, source):
    issue = report_issue(client, employee, source)

    assert issue["status"] == "open"
    assert issue["reported_by"] == str(employee.id)
    assert issue["reporter_name"] == "Employee"
    assert issue["warehouse_name"] == "Alpha Depot"
    assert activity_actions(client, employee, issue["id"]) == ["created"]


def test_issue_fields_are_validated(client, db, employee):
    too_long = client.post("/api/issues", headers=auth_headers(employee),
                           json={"title": "x" * 101, "description": "d"})
    bad_category = client.post("/api/issues", headers=auth_headers(employee),
                               json={"title": "t", "description": "d", "category": "weather"})

    assert too_long.status_code == 422
    assert bad_category.status_code == 422
    assert db.query(Issue).count() == 0


def test_list_is_limited_to_involved_users(client, db, admin, employee, source_manager,
                                           destination_manager, source):
    report_issue(client, employee, source)
    report_issue(client, destination_manager, title="Broken forklift", category="equipment")

    def titles(user):
        rows = client.get("/api/issues", headers=auth_headers(user)).json()["data"]
        return sorted(r["title"] for r in rows)

    assert titles(admin) == ["Broken forklift", "Leaking roof"]
    assert titles(employee) == ["Leaking roof"]
    assert titles(source_manager) == ["Leaking roof"]
    assert titles(destination_manager) == ["Broken forklift"]


def test_assignee_can_follow_the_issue(client, db, employee, destination_manager):
    issue = report_issue(client, employee, assigned_to=str(destination_manager.id))

    assert issue["assignee_name"] == "Destination_Manager"
    resp = client.patch(f"/api/issues/{issue['id']}/status", headers=auth_headers(destination_manager),
                        json={"status": "in-progress", "comment": "On it"})

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["status"] == "in-progress"


def test_status_change_is_recorded(client, db, employee, source_manager, source):
    issue = report_issue(client, employee, source)

    resp = client.patch(f"/api/issues/{issue['id']}/status", headers=auth_headers(source_manager),
                        json={"status": "in-progress"})

    assert resp.status_code == 200, resp.text
    change = db.query(IssueActivity).filter(IssueActivity.action == "status_changed").one()
    assert change.previous_value == "open"
    assert change.new_value == "in-progress"
    assert change.user_id == source_manager.id


def test_outsiders_cannot_touch_an_issue(client, db, employee, destination_manager, source):
    issue = report_issue(client, employee, source)

    status = client.patch(f"/api/issues/{issue['id']}/status", headers=auth_headers(destination_manager),
                          json={"status": "resolved"})
    activities = client.get(f"/api/issues/{issue['id']}/activities",
                            headers=auth_headers(destination_manager))

    assert status.status_code == 403
    assert activities.status_code == 403


def test_closing_requires_resolution_notes(client, db, employee, source):
    issue = report_issue(client, employee, source)

    assert close(client, employee, issue["id"], notes="   ").status_code == 400
    assert client.patch(f"/api/issues/{issue['id']}/status", headers=auth_headers(employee),
                        json={"status": "closed"}).status_code == 400

    resp = close(client, employee, issue["id"])
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["status"] == "closed"
    assert data["resolution_notes"] == "Patched the roof"
    assert data["closed_by"] == str(employee.id)


def test_closed_issue_only_moves_by_reopening(client, db, admin, employee, source):
    issue = report_issue(client, employee, source)
    close(client, admin, issue["id"])

    assert close(client, admin, issue["id"]).status_code == 400
    resp = client.patch(f"/api/issues/{issue['id']}/status", headers=auth_headers(admin),
                        json={"status": "open"})
    assert resp.status_code == 400


def test_only_the_reporter_reopens(client, db, admin, employee, source):
    issue = report_issue(client, employee, source)

    not_closed = client.patch(f"/api/issues/{issue['id']}/reopen", headers=auth_headers(employee))
    assert not_closed.status_code == 400

    close(client, admin, issue["id"])
    by_admin = client.patch(f"/api/issues/{issue['id']}/reopen", headers=auth_headers(admin))
    assert by_admin.status_code == 403

    resp = client.patch(f"/api/issues/{issue['id']}/reopen", headers=auth_headers(employee))
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["status"] == "open"
    assert data["reopened_by"] == str(employee.id)
    assert activity_actions(client, employee, issue["id"]) == ["created", "closed", "reopened"]


def test_only_admins_delete_closed_issues(client, db, admin, employee, source):
    issue = report_issue(client, employee, source)

    assert client.delete(f"/api/issues/{issue['id']}", headers=auth_headers(admin)).status_code == 400

    close(client, employee, issue["id"])
    assert client.delete(f"/api/issues/{issue['id']}", headers=auth_headers(employee)).status_code == 403

    resp = client.delete(f"/api/issues/{issue['id']}", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert db.query(Issue).count() == 0
    assert db.query(IssueActivity).count() == 0
    assert client.get(f"/api/issues/{issue['id']}", headers=auth_headers(admin)).status_code == 404
