import pytest

from warehouse_service.app.models.sales.clients import Client
from warehouse_service.app.models.stock.transactions import Transaction
from warehouse_service.app.models.system.notifications import Notification

from conftest import add_stock, auth_headers, stock_of


@pytest.fixture
def customer(db):
    client_row = Client(client_code="CLI-0001", name="Globex", address="1 Main St")
    db.add(client_row)
    db.commit()
    db.refresh(client_row)
    return client_row


def draft_order(client, user, customer, warehouse, item, quantity=10, unit_price=12.5, tax_percent=18):
    resp = client.post("/api/sales-orders", headers=auth_headers(user), json={
        "client_id": str(customer.id),
        "warehouse_id": str(warehouse.id),
        "items": [{"item_id": str(item.id), "quantity": quantity,
                   "unit_price": unit_price, "tax_percent": tax_percent}],
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def approved_order(client, employee, manager, customer, warehouse, item, quantity=10):
    order = draft_order(client, employee, customer, warehouse, item, quantity=quantity)
    client.post(f"/api/sales-orders/{order['id']}/submit", headers=auth_headers(employee))
    client.post(f"/api/sales-orders/{order['id']}/approve", headers=auth_headers(manager))
    return order


def test_client_codes_are_sequential(client, db, source_manager, customer):
    next_code = client.get("/api/clients/next-code", headers=auth_headers(source_manager)).json()["data"]
    assert next_code["code"] == "CLI-0002"

    created = client.post("/api/clients", headers=auth_headers(source_manager),
                          json={"name": "Initech"}).json()["data"]
    assert created["client_code"] == "CLI-0002"


def test_client_with_orders_cannot_be_deleted(client, db, employee, source_manager, customer, source, item):
    draft_order(client, employee, customer, source, item)

    resp = client.delete(f"/api/clients/{customer.id}", headers=auth_headers(source_manager))

    assert resp.status_code == 400


def test_draft_totals(client, db, employee, customer, source, item):
    order = draft_order(client, employee, customer, source, item, quantity=4, unit_price=12.5, tax_percent=18)

    assert order["order_code"] == "SO-0001"
    assert order["status"] == "draft"
    assert order["subtotal"] == 50.0
    assert order["tax_amount"] == 9.0
    assert order["total_amount"] == 59.0
    assert order["shipping_address"] == "1 Main St"


def test_empty_order_cannot_be_submitted(client, db, employee, customer, source):
    resp = client.post("/api/sales-orders", headers=auth_headers(employee), json={
        "client_id": str(customer.id), "warehouse_id": str(source.id), "items": [],
    })
    order = resp.json()["data"]

    submit = client.post(f"/api/sales-orders/{order['id']}/submit", headers=auth_headers(employee))

    assert submit.status_code == 400


def test_submit_notifies_approver(client, db, employee, source_manager, customer, source, item):
    order = draft_order(client, employee, customer, source, item)

    resp = client.post(f"/api/sales-orders/{order['id']}/submit", headers=auth_headers(employee))

    assert resp.json()["data"]["status"] == "waiting_approval"
    note = db.query(Notification).one()
    assert note.recipient_id == source_manager.id

    pending = client.get("/api/sales-orders/pending-approvals",
                         headers=auth_headers(source_manager)).json()["data"]
    assert [o["id"] for o in pending] == [order["id"]]

    unread = client.get("/api/notifications/unread-count",
                        headers=auth_headers(source_manager)).json()["data"]
    assert unread["count"] == 1


def test_reject_returns_to_draft(client, db, employee, source_manager, customer, source, item):
    order = draft_order(client, employee, customer, source, item)
    client.post(f"/api/sales-orders/{order['id']}/submit", headers=auth_headers(employee))

    resp = client.post(f"/api/sales-orders/{order['id']}/reject", headers=auth_headers(source_manager),
                       json={"comments": "Price too low"})

    data = resp.json()["data"]
    assert data["status"] == "draft"
    assert data["approvals"][0]["status"] == "rejected"
    assert db.query(Notification).filter(Notification.recipient_id == employee.id).count() == 1


def test_employee_cannot_approve(client, db, employee, customer, source, item):
    order = draft_order(client, employee, customer, source, item)
    client.post(f"/api/sales-orders/{order['id']}/submit", headers=auth_headers(employee))

    resp = client.post(f"/api/sales-orders/{order['id']}/approve", headers=auth_headers(employee))

    assert resp.status_code == 403


def test_partial_then_full_dispatch(client, db, employee, source_manager, customer, source, item):
    add_stock(db, item, source, 100)
    order = approved_order(client, employee, source_manager, customer, source, item, quantity=10)
    line_id = order["items"][0]["id"]

    first = client.post(f"/api/sales-orders/{order['id']}/dispatch", headers=auth_headers(source_manager),
                        json={"courier_name": "FastShip",
                              "items": [{"sales_order_item_id": line_id, "quantity": 4}]})
    assert first.status_code == 200, first.text
    assert first.json()["data"]["dispatch_code"] == "DIS-0001"

    detail = client.get(f"/api/sales-orders/{order['id']}", headers=auth_headers(employee)).json()["data"]
    assert detail["status"] == "partial_shipped"
    assert detail["items"][0]["remaining_quantity"] == 6
    assert stock_of(db, item, source) == 96

    too_many = client.post(f"/api/sales-orders/{order['id']}/dispatch", headers=auth_headers(source_manager),
                           json={"items": [{"sales_order_item_id": line_id, "quantity": 7}]})
    assert too_many.status_code == 400

    client.post(f"/api/sales-orders/{order['id']}/dispatch", headers=auth_headers(source_manager),
                json={"items": [{"sales_order_item_id": line_id, "quantity": 6}]})
    detail = client.get(f"/api/sales-orders/{order['id']}", headers=auth_headers(employee)).json()["data"]
    assert detail["status"] == "closed"
    assert stock_of(db, item, source) == 90
    assert [t.transaction_type for t in db.query(Transaction).all()] == ["issue", "issue"]


def test_dispatch_beyond_stock_is_refused(client, db, employee, source_manager, customer, source, item):
    add_stock(db, item, source, 3)
    order = approved_order(client, employee, source_manager, customer, source, item, quantity=10)

    resp = client.post(f"/api/sales-orders/{order['id']}/dispatch", headers=auth_headers(source_manager),
                       json={"items": [{"sales_order_item_id": order["items"][0]["id"], "quantity": 5}]})

    assert resp.status_code == 400
    assert stock_of(db, item, source) == 3


def test_draft_order_cannot_be_dispatched(client, db, employee, source_manager, customer, source, item):
    add_stock(db, item, source, 50)
    order = draft_order(client, employee, customer, source, item)

    resp = client.post(f"/api/sales-orders/{order['id']}/dispatch", headers=auth_headers(source_manager),
                       json={"items": [{"sales_order_item_id": order["items"][0]["id"], "quantity": 1}]})

    assert resp.status_code == 400


def test_deliver_and_documents(client, db, employee, source_manager, customer, source, item):
    add_stock(db, item, source, 50)
    order = approved_order(client, employee, source_manager, customer, source, item, quantity=2)
    dispatch = client.post(f"/api/sales-orders/{order['id']}/dispatch", headers=auth_headers(source_manager),
                           json={"items": [{"sales_order_item_id": order["items"][0]["id"],
                                            "quantity": 2}]}).json()["data"]

    delivered = client.patch(f"/api/dispatches/{dispatch['id']}/deliver", headers=auth_headers(source_manager))
    assert delivered.json()["data"]["status"] == "delivered"

    pdf = client.get(f"/api/sales-orders/{order['id']}/pdf", headers=auth_headers(employee))
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

    challan = client.get(f"/api/dispatches/{dispatch['id']}/challan", headers=auth_headers(employee))
    assert challan.content.startswith(b"%PDF")


def test_only_drafts_can_be_deleted_by_non_admins(client, db, admin, employee, source_manager,
                                                  customer, source, item):
    order = draft_order(client, employee, customer, source, item)
    client.post(f"/api/sales-orders/{order['id']}/submit", headers=auth_headers(employee))

    denied = client.delete(f"/api/sales-orders/{order['id']}", headers=auth_headers(employee))
    assert denied.status_code == 403

    allowed = client.delete(f"/api/sales-orders/{order['id']}", headers=auth_headers(admin))
    assert allowed.status_code == 200
