from conftest import add_stock, auth_headers, stock_of


def post_txn(client, user, **payload):
    return client.post("/api/transactions", headers=auth_headers(user), json=payload)


def test_check_in_creates_inventory_row(client, db, employee, source, item):
    resp = post_txn(client, employee, transaction_type="check-in", item_id=str(item.id),
                    quantity=25, destination_warehouse_id=str(source.id), cost=4.5,
                    supplier_name="Acme")

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["transaction_code"] == "TRX-00001"
    assert data["status"] == "completed"
    assert stock_of(db, item, source) == 25


def test_codes_are_sequential(client, db, admin, source, item):
    for _ in range(2):
        post_txn(client, admin, transaction_type="check-in", item_id=str(item.id),
                 quantity=1, destination_warehouse_id=str(source.id))

    codes = [t["transaction_code"] for t in
             client.get("/api/transactions", headers=auth_headers(admin)).json()["data"]]
    assert sorted(codes) == ["TRX-00001", "TRX-00002"]


def test_issue_is_manager_only(client, db, employee, source, item):
    add_stock(db, item, source, 10)

    resp = post_txn(client, employee, transaction_type="issue", item_id=str(item.id),
                    quantity=2, source_warehouse_id=str(source.id))

    assert resp.status_code == 403
    assert stock_of(db, item, source) == 10


def test_issue_beyond_stock_is_refused(client, db, source_manager, source, item):
    add_stock(db, item, source, 3)

    resp = post_txn(client, source_manager, transaction_type="issue", item_id=str(item.id),
                    quantity=5, source_warehouse_id=str(source.id))

    assert resp.status_code == 400
    assert stock_of(db, item, source) == 3


def test_in_transit_transfer_then_complete(client, db, admin, source, destination, item):
    add_stock(db, item, source, 20)

    resp = post_txn(client, admin, transaction_type="transfer", item_id=str(item.id), quantity=5,
                    source_warehouse_id=str(source.id), destination_warehouse_id=str(destination.id))
    data = resp.json()["data"]
    assert data["status"] == "in-transit"
    assert stock_of(db, item, source) == 15
    assert stock_of(db, item, destination) == 0

    resp = client.patch(f"/api/transactions/{data['id']}/status", headers=auth_headers(admin),
                        json={"status": "completed"})
    assert resp.json()["data"]["status"] == "completed"
    assert stock_of(db, item, destination) == 5

    again = client.patch(f"/api/transactions/{data['id']}/status", headers=auth_headers(admin),
                         json={"status": "cancelled"})
    assert again.status_code == 400


def test_cancelled_transfer_returns_stock(client, db, admin, source, destination, item):
    add_stock(db, item, source, 20)
    txn = post_txn(client, admin, transaction_type="transfer", item_id=str(item.id), quantity=5,
                   source_warehouse_id=str(source.id),
                   destination_warehouse_id=str(destination.id)).json()["data"]

    client.patch(f"/api/transactions/{txn['id']}/status", headers=auth_headers(admin),
                 json={"status": "cancelled"})

    assert stock_of(db, item, source) == 20
    assert stock_of(db, item, destination) == 0


def test_transfer_to_same_warehouse_is_invalid(client, db, admin, source, item):
    add_stock(db, item, source, 20)

    resp = post_txn(client, admin, transaction_type="transfer", item_id=str(item.id), quantity=5,
                    source_warehouse_id=str(source.id), destination_warehouse_id=str(source.id))

    assert resp.status_code == 400


def test_filter_by_type_and_warehouse(client, db, admin, source, destination, item):
    post_txn(client, admin, transaction_type="check-in", item_id=str(item.id), quantity=5,
             destination_warehouse_id=str(source.id))
    post_txn(client, admin, transaction_type="check-in", item_id=str(item.id), quantity=5,
             destination_warehouse_id=str(destination.id))

    by_type = client.get("/api/transactions/type/check-in", headers=auth_headers(admin)).json()["data"]
    by_warehouse = client.get(f"/api/transactions/warehouse/{source.id}",
                              headers=auth_headers(admin)).json()["data"]

    assert len(by_type) == 2
    assert len(by_warehouse) == 1
    assert client.get("/api/transactions/type/lost", headers=auth_headers(admin)).status_code == 400


def test_dispose_writes_disposal_transfer(client, db, admin, source, item):
    add_stock(db, item, source, 10)

    resp = client.post("/api/inventory/dispose", headers=auth_headers(admin), json={
        "item_id": str(item.id), "warehouse_id": str(source.id),
        "quantity": 4, "reason": "Expired",
    })

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["transfer_code"] == "DISP-0001"
    assert data["remaining_quantity"] == 6
    assert stock_of(db, item, source) == 6

    disposed = client.get("/api/disposed-inventory", headers=auth_headers(admin)).json()["data"]
    assert len(disposed) == 1


def test_update_quantity_overwrites_existing_row(client, db, source_manager, source, item):
    add_stock(db, item, source, 12)

    resp = client.put("/api/inventory/update-quantity", headers=auth_headers(source_manager), json={
        "item_id": str(item.id), "warehouse_id": str(source.id), "quantity": 30,
    })

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["quantity"] == 30
    assert stock_of(db, item, source) == 30


def test_update_quantity_needs_an_inventory_row(client, db, source_manager, source, item):
    resp = client.put("/api/inventory/update-quantity", headers=auth_headers(source_manager), json={
        "item_id": str(item.id), "warehouse_id": str(source.id), "quantity": 5,
    })

    assert resp.status_code == 400
    assert stock_of(db, item, source) == 0


def test_update_quantity_is_manager_only(client, db, employee, source, item):
    add_stock(db, item, source, 12)

    resp = client.put("/api/inventory/update-quantity", headers=auth_headers(employee), json={
        "item_id": str(item.id), "warehouse_id": str(source.id), "quantity": 1,
    })

    assert resp.status_code == 403
    assert stock_of(db, item, source) == 12
