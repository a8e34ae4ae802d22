from warehouse_service.app.models.stock.transactions import Transaction
from warehouse_service.app.models.transfers.rejected_goods import RejectedGoods

from conftest import add_stock, auth_headers, stock_of


def create_transfer(client, user, source, destination, item, quantity=10):
    resp = client.post("/api/transfers", headers=auth_headers(user), json={
        "source_warehouse_id": str(source.id),
        "destination_warehouse_id": str(destination.id),
        "items": [{"item_id": str(item.id), "requested_quantity": quantity}],
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def patch_status(client, user, transfer_id, status, **fields):
    return client.patch(f"/api/transfers/{transfer_id}", headers=auth_headers(user),
                        json={"status": status, **fields})


def test_create_assigns_code_and_leaves_stock_alone(client, db, source_manager, source, destination, item):
    add_stock(db, item, source, 50)

    transfer = create_transfer(client, source_manager, source, destination, item)

    assert transfer["transfer_code"] == "TRF-0001"
    assert transfer["status"] == "pending"
    assert len(transfer["items"]) == 1
    assert transfer["next_statuses"] == ["approved", "rejected"]
    assert stock_of(db, item, source) == 50


def test_create_rejects_insufficient_stock(client, db, source_manager, source, destination, item):
    add_stock(db, item, source, 3)

    resp = client.post("/api/transfers", headers=auth_headers(source_manager), json={
        "source_warehouse_id": str(source.id),
        "destination_warehouse_id": str(destination.id),
        "items": [{"item_id": str(item.id), "requested_quantity": 10}],
    })

    assert resp.status_code == 400


def test_create_from_foreign_warehouse_is_forbidden(client, db, destination_manager, source, destination, item):
    add_stock(db, item, source, 50)

    resp = client.post("/api/transfers", headers=auth_headers(destination_manager), json={
        "source_warehouse_id": str(source.id),
        "destination_warehouse_id": str(destination.id),
        "items": [{"item_id": str(item.id), "requested_quantity": 5}],
    })

    assert resp.status_code == 403


def test_completed_transfer_moves_quantity_exactly(client, db, source_manager, destination_manager,
                                                   source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item, quantity=10)
    tid = transfer["id"]

    assert patch_status(client, source_manager, tid, "approved").status_code == 200
    assert patch_status(client, source_manager, tid, "in-transit").status_code == 200
    assert stock_of(db, item, source) == 50

    resp = patch_status(client, destination_manager, tid, "completed")

    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["status"] == "completed"
    assert stock_of(db, item, source) == 40
    assert stock_of(db, item, destination) == 10

    kinds = sorted(t.transaction_type for t in db.query(Transaction).all())
    assert kinds == ["check-in", "check-out"]


def test_partial_receipt_credits_actual_quantity(client, db, source_manager, destination_manager,
                                                 source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item, quantity=10)
    tid = transfer["id"]
    line_id = transfer["items"][0]["id"]

    patch_status(client, source_manager, tid, "approved")
    patch_status(client, source_manager, tid, "in-transit")
    resp = client.patch(f"/api/transfers/{tid}/items/{line_id}", headers=auth_headers(destination_manager),
                        json={"actual_quantity": 8, "condition": "damaged"})
    assert resp.status_code == 200, resp.text

    patch_status(client, destination_manager, tid, "completed")

    assert stock_of(db, item, source) == 40
    assert stock_of(db, item, destination) == 8


def test_in_transit_requires_approval_first(client, db, source_manager, source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item)

    resp = patch_status(client, source_manager, transfer["id"], "in-transit")

    assert resp.status_code == 400
    assert client.get(f"/api/transfers/{transfer['id']}",
                      headers=auth_headers(source_manager)).json()["data"]["status"] == "pending"


def test_destination_manager_cannot_ship(client, db, source_manager, destination_manager,
                                         source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item)
    patch_status(client, source_manager, transfer["id"], "approved")

    resp = patch_status(client, destination_manager, transfer["id"], "in-transit")

    assert resp.status_code == 403


def test_rejecting_pending_transfer_never_touches_inventory(client, db, source_manager, destination_manager,
                                                            source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item)

    resp = client.post(f"/api/transfers/{transfer['id']}/reject", headers=auth_headers(destination_manager),
                       json={"reason": "Not needed"})

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["status"] == "rejected"
    assert data["rejection_reason"] == "Not needed"
    assert stock_of(db, item, source) == 50
    assert stock_of(db, item, destination) == 0
    assert db.query(Transaction).count() == 0
    assert db.query(RejectedGoods).count() == 0


def test_return_flow_restores_source(client, db, admin, source_manager, destination_manager,
                                     source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item, quantity=10)
    tid = transfer["id"]
    patch_status(client, source_manager, tid, "approved")
    patch_status(client, source_manager, tid, "in-transit")

    resp = client.post(f"/api/transfers/{tid}/reject", headers=auth_headers(destination_manager),
                       json={"reason": "Wrong goods"})
    assert resp.json()["data"]["status"] == "return_requested"
    assert stock_of(db, item, source) == 40
    goods = db.query(RejectedGoods).all()
    assert len(goods) == 1 and goods[0].warehouse_id == destination.id

    resp = client.post(f"/api/transfers/{tid}/approve-return", headers=auth_headers(admin), json={})
    assert resp.json()["data"]["status"] == "return_approved"

    resp = client.post(f"/api/transfers/{tid}/return-shipment", headers=auth_headers(destination_manager),
                       json={"courier_name": "FastShip", "tracking_number": "FS-1"})
    assert resp.json()["data"]["status"] == "return_shipped"

    resp = client.post(f"/api/transfers/{tid}/return-delivery", headers=auth_headers(source_manager), json={})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["status"] == "returned"
    assert stock_of(db, item, source) == 50

    db.expire_all()
    assert db.query(RejectedGoods).first().status == "returned"


def test_disposal_requires_admin(client, db, admin, source_manager, destination_manager,
                                 source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item, quantity=5)
    tid = transfer["id"]
    patch_status(client, source_manager, tid, "approved")
    patch_status(client, source_manager, tid, "in-transit")
    client.post(f"/api/transfers/{tid}/reject", headers=auth_headers(destination_manager),
                json={"reason": "Broken"})

    denied = client.post(f"/api/transfers/{tid}/approve-disposal",
                         headers=auth_headers(destination_manager), json={"reason": "Scrap"})
    assert denied.status_code == 403

    resp = client.post(f"/api/transfers/{tid}/approve-disposal", headers=auth_headers(admin),
                       json={"reason": "Scrap"})
    assert resp.json()["data"]["status"] == "disposed"
    assert stock_of(db, item, source) == 45

    db.expire_all()
    assert db.query(RejectedGoods).first().status == "disposed"


def test_every_change_is_logged(client, db, source_manager, source, destination, item):
    add_stock(db, item, source, 50)
    transfer = create_transfer(client, source_manager, source, destination, item)
    patch_status(client, source_manager, transfer["id"], "approved")

    detail = client.get(f"/api/transfers/{transfer['id']}", headers=auth_headers(source_manager)).json()["data"]

    assert len(detail["updates"]) == 2
