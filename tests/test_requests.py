from warehouse_service.app.models.requests.requests import RequestApproval
from warehouse_service.app.models.requests.transfer_notifications import TransferNotification
from warehouse_service.app.models.stock.transactions import Transaction

from conftest import add_stock, auth_headers, stock_of


def create_request(client, user, warehouse, item, quantity):
    resp = client.post("/api/requests", headers=auth_headers(user), json={
        "warehouse_id": str(warehouse.id),
        "items": [{"item_id": str(item.id), "quantity": quantity}],
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def test_request_with_stock_stays_pending(client, db, employee, source, item):
    add_stock(db, item, source, 20)

    req = create_request(client, employee, source, item, 5)

    assert req["request_code"] == "REQ-1001"
    assert req["status"] == "pending"
    assert db.query(TransferNotification).count() == 0


def test_shortfall_notifies_donor_warehouses(client, db, employee, source, destination, item):
    add_stock(db, item, source, 2)
    add_stock(db, item, destination, 30)

    req = create_request(client, employee, source, item, 10)

    assert req["status"] == "pending-transfer"
    assert "Transfer required" in req["notes"]
    notice = db.query(TransferNotification).one()
    assert notice.warehouse_id == destination.id
    assert notice.required_quantity == 8


def test_approval_goes_to_the_requesters_manager(client, db, employee, source_manager, source, item):
    create_request(client, employee, source, item, 1)

    approval = db.query(RequestApproval).one()
    assert approval.approver_id == source_manager.id
    assert approval.approval_level == "manager"


def test_employee_sees_only_own_requests(client, db, admin, employee, source, item):
    add_stock(db, item, source, 20)
    create_request(client, employee, source, item, 1)
    create_request(client, admin, source, item, 1)

    mine = client.get("/api/requests", headers=auth_headers(employee)).json()["data"]
    everything = client.get("/api/requests", headers=auth_headers(admin)).json()["data"]

    assert len(mine) == 1
    assert len(everything) == 2


def test_approving_issues_from_requested_warehouse(client, db, admin, employee, source, item):
    add_stock(db, item, source, 20)
    req = create_request(client, employee, source, item, 5)

    resp = client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                        json={"status": "approved"})

    assert resp.status_code == 200, resp.text
    assert stock_of(db, item, source) == 15
    txn = db.query(Transaction).one()
    assert txn.transaction_type == "issue"
    assert txn.status == "completed"


def test_approving_a_shortfall_draws_from_donor(client, db, admin, employee, source, destination, item):
    add_stock(db, item, destination, 30)
    req = create_request(client, employee, source, item, 10)

    client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                 json={"status": "approved"})

    assert stock_of(db, item, destination) == 20
    txn = db.query(Transaction).one()
    assert txn.transaction_type == "transfer"
    assert txn.status == "in-transit"
    assert txn.destination_warehouse_id == source.id


def test_unfillable_request_writes_nothing(client, db, admin, employee, source, destination, item):
    add_stock(db, item, destination, 3)
    req = create_request(client, employee, source, item, 10)

    resp = client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                        json={"status": "approved"})

    assert resp.status_code == 400
    assert stock_of(db, item, destination) == 3
    assert db.query(Transaction).count() == 0


def test_approver_completes_request(client, db, employee, source_manager, source, item):
    add_stock(db, item, source, 20)
    req = create_request(client, employee, source, item, 4)
    approval = db.query(RequestApproval).one()

    pending = client.get("/api/pending-approvals", headers=auth_headers(source_manager)).json()["data"]
    assert [a["id"] for a in pending] == [str(approval.id)]

    resp = client.post(f"/api/request-approvals/{approval.id}/approve",
                       headers=auth_headers(source_manager), json={"comments": "ok"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["status"] == "approved"

    detail = client.get(f"/api/requests/{req['id']}", headers=auth_headers(employee)).json()["data"]
    assert detail["status"] == "completed"
    assert stock_of(db, item, source) == 16


def test_only_assigned_approver_may_act(client, db, employee, destination_manager, source, item):
    create_request(client, employee, source, item, 1)
    approval = db.query(RequestApproval).one()

    resp = client.patch(f"/api/approvals/{approval.id}/reject", headers=auth_headers(destination_manager))

    assert resp.status_code == 403


def test_rejection_is_final(client, db, admin, employee, source, item):
    req = create_request(client, employee, source, item, 1)
    client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                 json={"status": "rejected"})

    resp = client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                        json={"status": "approved"})

    assert resp.status_code == 400


def test_approved_request_cannot_be_rejected(client, db, admin, employee, source, item):
    add_stock(db, item, source, 20)
    req = create_request(client, employee, source, item, 5)
    client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                 json={"status": "approved"})

    resp = client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(admin),
                        json={"status": "rejected"})

    assert resp.status_code == 400
    assert stock_of(db, item, source) == 15
    detail = client.get(f"/api/requests/{req['id']}", headers=auth_headers(admin)).json()["data"]
    assert detail["status"] == "approved"


def test_transfer_notifications_listing(client, db, admin, employee, source, destination, item):
    add_stock(db, item, source, 2)
    add_stock(db, item, destination, 30)
    create_request(client, employee, source, item, 10)

    pending = client.get("/api/transfer-notifications", headers=auth_headers(admin)).json()["data"]
    assert len(pending) == 1
    assert pending[0]["warehouse_name"] == "Beta Depot"
    assert pending[0]["required_quantity"] == 8
    assert pending[0]["available_quantity"] == 30
    assert pending[0]["resolved_at"] == ""

    donor = client.get(f"/api/transfer-notifications/warehouse/{destination.id}",
                       headers=auth_headers(admin)).json()["data"]
    requested = client.get(f"/api/transfer-notifications/warehouse/{source.id}",
                           headers=auth_headers(admin)).json()["data"]
    assert len(donor) == 1
    assert requested == []


def test_resolving_a_transfer_notification_stamps_it(client, db, destination_manager, employee,
                                                     source, destination, item):
    add_stock(db, item, source, 2)
    add_stock(db, item, destination, 30)
    create_request(client, employee, source, item, 10)
    notice = db.query(TransferNotification).one()

    denied = client.patch(f"/api/transfer-notifications/{notice.id}", headers=auth_headers(employee),
                          json={"status": "approved"})
    assert denied.status_code == 403

    resp = client.patch(f"/api/transfer-notifications/{notice.id}", headers=auth_headers(destination_manager),
                        json={"status": "approved", "notes": "Sending tomorrow"})

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["status"] == "approved"
    assert data["notes"] == "Sending tomorrow"
    assert data["resolved_at"] != ""
    assert client.get("/api/transfer-notifications",
                      headers=auth_headers(destination_manager)).json()["data"] == []
