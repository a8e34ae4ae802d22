from shared.data.seed_admin import ensure_admin

from conftest import auth_headers, make_user


def test_login_returns_token_and_user(client, db, admin):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "secret123"})

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["access_token"]
    assert data["user"]["role"] == "admin"

    me = client.get("/api/current-user", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.json()["data"]["username"] == "admin"


def test_wrong_password_is_unauthorized(client, db, admin):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

    assert resp.status_code == 401


def test_inactive_user_cannot_login(client, db):
    make_user(db, "sleepy", "employee", status="inactive")

    resp = client.post("/api/auth/login", json={"username": "sleepy", "password": "secret123"})

    assert resp.status_code == 403


def test_missing_token_is_rejected(client, db):
    assert client.get("/api/items").status_code in (401, 403)


def test_garbage_token_is_rejected(client, db):
    resp = client.get("/api/items", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401


def test_deactivated_user_token_stops_working(client, db, admin, employee):
    headers = auth_headers(employee)
    client.patch(f"/api/users/{employee.id}/status", headers=auth_headers(admin),
                 json={"status": "inactive"})

    assert client.get("/api/items", headers=headers).status_code == 403


def test_admin_cannot_delete_self(client, db, admin):
    resp = client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))

    assert resp.status_code == 400


def test_employee_cannot_list_users(client, db, employee):
    assert client.get("/api/users", headers=auth_headers(employee)).status_code == 403


def test_created_user_can_login(client, db, admin):
    resp = client.post("/api/users", headers=auth_headers(admin), json={
        "username": "picker", "password": "picker123", "name": "Picker", "role": "employee",
    })
    assert resp.status_code == 200, resp.text
    assert "password" not in resp.json()["data"]

    login = client.post("/api/auth/login", json={"username": "picker", "password": "picker123"})
    assert login.status_code == 200


def test_seed_creates_single_admin(db):
    first = ensure_admin(db, "root", "rootpass")
    second = ensure_admin(db, "other", "otherpass")

    assert first.id == second.id
    assert first.verify_password("rootpass")
