import uuid

from warehouse_service.app.models.masters.categories import Category
from warehouse_service.app.models.masters.departments import Department

from conftest import auth_headers, make_user


def test_department_crud(client, db, admin):
    headers = auth_headers(admin)

    resp = client.post("/api/departments", headers=headers, json={"name": "Maintenance"})
    assert resp.status_code == 200, resp.text
    department_id = resp.json()["data"]["id"]

    resp = client.put(f"/api/departments/{department_id}", headers=headers,
                      json={"description": "Plant upkeep"})
    assert resp.json()["data"]["description"] == "Plant upkeep"

    names = [d["name"] for d in client.get("/api/departments", headers=headers).json()["data"]]
    assert names == ["Maintenance"]

    resp = client.delete(f"/api/departments/{department_id}", headers=headers)
    assert resp.status_code == 200
    assert db.query(Department).count() == 0


def test_department_name_must_be_unique(client, db, admin):
    client.post("/api/departments", headers=auth_headers(admin), json={"name": "Maintenance"})

    resp = client.post("/api/departments", headers=auth_headers(admin), json={"name": "Maintenance"})

    assert resp.status_code == 400


def test_department_with_users_cannot_be_deleted(client, db, admin):
    department = Department(name="Logistics")
    db.add(department)
    db.commit()
    make_user(db, "driver", "employee", department_id=department.id)

    resp = client.delete(f"/api/departments/{department.id}", headers=auth_headers(admin))

    assert resp.status_code == 400
    assert db.query(Department).count() == 1


def test_departments_are_admin_managed(client, db, source_manager):
    resp = client.post("/api/departments", headers=auth_headers(source_manager), json={"name": "Ops"})

    assert resp.status_code == 403


def test_category_crud_by_manager(client, db, source_manager, item):
    headers = auth_headers(source_manager)

    resp = client.post("/api/categories", headers=headers, json={"name": "Fasteners"})
    assert resp.status_code == 200, resp.text
    category_id = resp.json()["data"]["id"]
    item.category_id = uuid.UUID(category_id)
    db.commit()

    duplicate = client.post("/api/categories", headers=headers, json={"name": "Fasteners"})
    assert duplicate.status_code == 400

    resp = client.put(f"/api/categories/{category_id}", headers=headers, json={"name": "Bolts"})
    assert resp.json()["data"]["name"] == "Bolts"

    resp = client.delete(f"/api/categories/{category_id}", headers=headers)
    assert resp.status_code == 200
    assert db.query(Category).count() == 0
    db.expire_all()
    assert item.category_id is None


def test_employee_cannot_create_categories(client, db, employee):
    resp = client.post("/api/categories", headers=auth_headers(employee), json={"name": "Tools"})

    assert resp.status_code == 403


def test_location_crud(client, db, admin):
    headers = auth_headers(admin)

    resp = client.post("/api/locations", headers=headers,
                       json={"name": "North Yard", "address": "12 Dock Rd"})
    assert resp.status_code == 200, resp.text
    location_id = resp.json()["data"]["id"]
    assert resp.json()["data"]["is_active"] is True

    duplicate = client.post("/api/locations", headers=headers, json={"name": "North Yard"})
    assert duplicate.status_code == 400

    resp = client.put(f"/api/locations/{location_id}", headers=headers, json={"is_active": False})
    assert resp.json()["data"]["is_active"] is False
    assert resp.json()["data"]["address"] == "12 Dock Rd"

    assert client.delete(f"/api/locations/{location_id}", headers=headers).status_code == 200
    assert client.get("/api/locations", headers=headers).json()["data"] == []


def test_unknown_location_is_not_found(client, db, admin):
    resp = client.put("/api/locations/00000000-0000-0000-0000-000000000000",
                      headers=auth_headers(admin), json={"name": "Nowhere"})

    assert resp.status_code == 404


def test_locations_are_admin_only(client, db, source_manager):
    assert client.get("/api/locations", headers=auth_headers(source_manager)).status_code == 403


def test_approval_settings_crud(client, db, admin):
    headers = auth_headers(admin)

    resp = client.post("/api/approval-settings", headers=headers, json={})
    assert resp.status_code == 200, resp.text
    setting = resp.json()["data"]
    assert setting["request_type"] == "issue"
    assert setting["min_approval_level"] == "manager"
    assert setting["requires_second_approval"] is False

    resp = client.put(f"/api/approval-settings/{setting['id']}", headers=headers,
                      json={"min_approval_level": "admin", "max_amount": 500})
    assert resp.json()["data"]["min_approval_level"] == "admin"
    assert float(resp.json()["data"]["max_amount"]) == 500

    assert len(client.get("/api/approval-settings", headers=headers).json()["data"]) == 1
    assert client.delete(f"/api/approval-settings/{setting['id']}", headers=headers).status_code == 200
    assert client.get("/api/approval-settings", headers=headers).json()["data"] == []


def test_approval_level_must_be_known(client, db, admin):
    resp = client.post("/api/approval-settings", headers=auth_headers(admin),
                       json={"min_approval_level": "employee"})

    assert resp.status_code == 422


def test_approval_settings_are_admin_only(client, db, source_manager):
    resp = client.post("/api/approval-settings", headers=auth_headers(source_manager), json={})

    assert resp.status_code == 403
