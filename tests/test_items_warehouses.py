from conftest import add_stock, auth_headers


def test_duplicate_sku_is_rejected(client, db, source_manager, item):
    resp = client.post("/api/items", headers=auth_headers(source_manager),
                       json={"sku": item.sku, "name": "Another widget"})

    assert resp.status_code == 400


def test_employee_cannot_create_items(client, db, employee):
    resp = client.post("/api/items", headers=auth_headers(employee),
                       json={"sku": "NEW-1", "name": "New"})

    assert resp.status_code == 403


def test_item_with_stock_cannot_be_deleted_or_deactivated(client, db, admin, source, item):
    add_stock(db, item, source, 5)

    deleted = client.delete(f"/api/items/{item.id}", headers=auth_headers(admin))
    deactivated = client.patch(f"/api/items/{item.id}/status", headers=auth_headers(admin),
                               json={"status": "inactive"})

    assert deleted.status_code == 400
    assert deactivated.status_code == 400


def test_empty_item_is_soft_deleted(client, db, admin, item):
    resp = client.delete(f"/api/items/{item.id}", headers=auth_headers(admin))

    assert resp.status_code == 200
    listed = client.get("/api/items", headers=auth_headers(admin)).json()["data"]
    assert all(i["id"] != str(item.id) for i in listed)


def test_checkin_history_newest_first(client, db, admin, source, item):
    for quantity in (3, 7):
        client.post("/api/transactions", headers=auth_headers(admin), json={
            "transaction_type": "check-in", "item_id": str(item.id),
            "quantity": quantity, "destination_warehouse_id": str(source.id),
        })

    history = client.get(f"/api/items/{item.id}/checkin-history",
                         headers=auth_headers(admin)).json()["data"]

    assert [h["quantity"] for h in history] == [7, 3]


def test_warehouse_name_must_be_unique(client, db, admin, source):
    resp = client.post("/api/warehouses", headers=auth_headers(admin),
                       json={"name": source.name, "location": "Elsewhere"})

    assert resp.status_code == 400


def test_archive_and_restore(client, db, admin, source):
    client.delete(f"/api/warehouses/{source.id}", headers=auth_headers(admin))
    active = client.get("/api/warehouses/active", headers=auth_headers(admin)).json()["data"]
    assert all(w["id"] != str(source.id) for w in active)

    client.patch(f"/api/warehouses/{source.id}/restore", headers=auth_headers(admin))
    active = client.get("/api/warehouses/active", headers=auth_headers(admin)).json()["data"]
    assert any(w["id"] == str(source.id) for w in active)


def test_manager_must_hold_a_managing_role(client, db, admin, employee, source):
    resp = client.patch(f"/api/warehouses/{source.id}/manager", headers=auth_headers(admin),
                        json={"manager_id": str(employee.id)})

    assert resp.status_code == 400


def test_stats_report_capacity_and_low_stock(client, db, admin, source, item):
    add_stock(db, item, source, 4)

    stats = client.get("/api/warehouses/stats", headers=auth_headers(admin)).json()["data"]
    alpha = next(s for s in stats if s["id"] == str(source.id))

    assert alpha["total_items"] == 4
    assert alpha["low_stock_items"] == 1
    assert alpha["capacity_used"] == 0.4


def test_available_inventory_skips_empty_rows(client, db, admin, source, item):
    add_stock(db, item, source, 0)

    rows = client.get(f"/api/warehouses/{source.id}/available-inventory",
                      headers=auth_headers(admin)).json()["data"]

    assert rows == []
