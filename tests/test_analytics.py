from datetime import datetime, timedelta, timezone

import pytest

from warehouse_service.app.models.masters.departments import Department
from warehouse_service.app.models.masters.items import Item
from warehouse_service.app.models.stock.transactions import Transaction

from conftest import add_stock, auth_headers


def today():
    return datetime.now(timezone.utc).date()


def window(start=None, end=None, **filters):
    params = {"start_date": (start or today()).isoformat(), "end_date": (end or today()).isoformat()}
    params.update({k: str(v) for k, v in filters.items()})
    return params


def check_in(client, user, item, warehouse, quantity, cost=None):
    payload = {
        "transaction_type": "check-in", "item_id": str(item.id),
        "quantity": quantity, "destination_warehouse_id": str(warehouse.id),
    }
    if cost is not None:
        payload["cost"] = cost
    resp = client.post("/api/transactions", headers=auth_headers(user), json=payload)
    assert resp.status_code == 200, resp.text


def request_and_decide(client, requester, approver, warehouse, item, quantity, status=None):
    resp = client.post("/api/requests", headers=auth_headers(requester), json={
        "warehouse_id": str(warehouse.id),
        "items": [{"item_id": str(item.id), "quantity": quantity}],
    })
    req = resp.json()["data"]
    if status:
        resp = client.patch(f"/api/requests/{req['id']}/status", headers=auth_headers(approver),
                            json={"status": status})
        assert resp.status_code == 200, resp.text
    return req


def report(client, user, name, **params):
    resp = client.get(f"/api/analytics/{name}", headers=auth_headers(user), params=params)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.fixture
def gadget(db):
    row = Item(sku="GAD-001", name="Gadget", unit="pcs", min_stock_level=0)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def operations(db, employee):
    department = Department(name="Operations")
    db.add(department)
    db.commit()
    employee.department_id = department.id
    db.commit()
    return department


def test_date_window_is_required_and_ordered(client, db, admin):
    missing = client.get("/api/analytics/fastest-moving", headers=auth_headers(admin))
    reversed_window = client.get("/api/analytics/fastest-moving", headers=auth_headers(admin),
                                 params=window(start=today(), end=today() - timedelta(days=1)))

    assert missing.status_code == 422
    assert reversed_window.status_code == 400


def test_analytics_are_for_managers(client, db, employee):
    resp = client.get("/api/analytics/most-ordered", headers=auth_headers(employee), params=window())

    assert resp.status_code == 403


def test_fastest_moving_counts_movements(client, db, admin, source, destination, item, gadget):
    check_in(client, admin, item, source, 10)
    check_in(client, admin, item, source, 10)
    check_in(client, admin, gadget, source, 4)

    rows = report(client, admin, "fastest-moving", **window())

    assert [r["item_name"] for r in rows] == ["Widget", "Gadget"]
    assert rows[0]["movement_count"] == 2
    assert rows[0]["total_quantity"] == 20
    assert rows[0]["turnover_rate"] == 10
    assert report(client, admin, "fastest-moving", **window(warehouse_id=destination.id)) == []


def test_most_ordered_counts_fulfilled_requests_only(client, db, admin, employee, source, item):
    add_stock(db, item, source, 50)
    request_and_decide(client, employee, admin, source, item, 5, status="approved")
    request_and_decide(client, employee, admin, source, item, 7)

    rows = report(client, admin, "most-ordered", **window())

    assert len(rows) == 1
    assert rows[0]["item_name"] == "Widget"
    assert rows[0]["order_count"] == 1
    assert rows[0]["total_quantity"] == 5


def test_department_consumption_values_fulfilled_lines(client, db, admin, employee, operations,
                                                       source, item):
    check_in(client, admin, item, source, 20, cost=4.0)
    request_and_decide(client, employee, admin, source, item, 5, status="approved")
    request_and_decide(client, employee, admin, source, item, 3, status="rejected")

    rows = report(client, admin, "department-consumption", **window())

    assert rows == [{
        "department_id": str(operations.id),
        "department_name": "Operations",
        "request_count": 1,
        "total_value": 20.0,
        "avg_value": 20.0,
    }]


def test_user_request_breakdown(client, db, admin, employee, operations, source, item):
    add_stock(db, item, source, 50)
    request_and_decide(client, employee, admin, source, item, 2, status="approved")
    request_and_decide(client, employee, admin, source, item, 2, status="rejected")
    request_and_decide(client, employee, admin, source, item, 2)

    rows = report(client, admin, "user-requests", **window())

    assert len(rows) == 1
    row = rows[0]
    assert row["user_name"] == "Employee"
    assert row["department_name"] == "Operations"
    assert (row["request_count"], row["approved_count"], row["rejected_count"], row["pending_count"]) == (3, 1, 1, 1)
    assert row["approval_rate"] == 33

    other = Department(name="Finance")
    db.add(other)
    db.commit()
    assert report(client, admin, "user-requests", **window(department_id=other.id)) == []


def test_price_variation_within_window(client, db, admin, source, item, gadget):
    for cost in (10, 12, 15):
        check_in(client, admin, item, source, 1, cost=cost)
    check_in(client, admin, gadget, source, 1, cost=3)

    rows = report(client, admin, "price-variation", **window())

    assert len(rows) == 1
    row = rows[0]
    assert row["item_name"] == "Widget"
    assert row["purchase_count"] == 3
    assert (row["start_price"], row["end_price"]) == (10.0, 15.0)
    assert (row["min_price"], row["max_price"], row["avg_price"]) == (10.0, 15.0, 12.33)
    assert row["price_change"] == 5.0
    assert row["variation_percent"] == 50


def test_price_variation_starts_from_last_earlier_purchase(client, db, admin, source, item):
    db.add(Transaction(
        transaction_code="TRX-90001", transaction_type="check-in", item_id=item.id, quantity=1,
        destination_warehouse_id=source.id, user_id=admin.id, status="completed", cost=8,
        created_at=datetime.now(timezone.utc) - timedelta(days=10),
    ))
    db.commit()
    check_in(client, admin, item, source, 1, cost=12)

    rows = report(client, admin, "price-variation", **window(start=today() - timedelta(days=3)))

    assert rows[0]["start_price"] == 8.0
    assert rows[0]["end_price"] == 12.0
    assert rows[0]["price_change"] == 4.0
    assert rows[0]["variation_percent"] == 50
