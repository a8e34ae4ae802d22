from datetime import datetime, timedelta, timezone

import pytest

from warehouse_service.app.crud.reports.reports_crud import classify_low_stock, percent_change
from warehouse_service.app.models.stock.transactions import Transaction

from conftest import add_stock, auth_headers


def check_in(client, user, item, warehouse, quantity, cost=None):
    payload = {
        "transaction_type": "check-in", "item_id": str(item.id),
        "quantity": quantity, "destination_warehouse_id": str(warehouse.id),
    }
    if cost is not None:
        payload["cost"] = cost
    resp = client.post("/api/transactions", headers=auth_headers(user), json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.mark.parametrize("quantity, minimum, expected", [
    (0, 10, "critical"),
    (2, 10, "critical"),
    (5, 10, "low"),
    (9, 10, "warning"),
])
def test_low_stock_classification(quantity, minimum, expected):
    assert classify_low_stock(quantity, minimum) == expected


def test_percent_change():
    assert percent_change(5, 0) == 100.0
    assert percent_change(0, 0) == 0.0
    assert percent_change(15, 10) == 50.0
    assert percent_change(1, 3) == -66.7


def test_stock_report_flags_low_rows(client, db, admin, source, item):
    add_stock(db, item, source, 4)

    rows = client.get("/api/reports/inventory-stock", headers=auth_headers(admin)).json()["data"]

    assert len(rows) == 1
    assert rows[0]["is_low_stock"] is True
    assert rows[0]["warehouse_name"] == source.name


def test_low_stock_report_orders_most_critical_first(client, db, admin, source, destination, item):
    add_stock(db, item, source, 6)
    add_stock(db, item, destination, 1)

    rows = client.get("/api/reports/low-stock", headers=auth_headers(admin)).json()["data"]

    assert [r["warehouse_id"] for r in rows] == [str(destination.id), str(source.id)]
    assert [r["status"] for r in rows] == ["critical", "warning"]

    critical_only = client.get("/api/reports/low-stock?status=critical",
                               headers=auth_headers(admin)).json()["data"]
    assert len(critical_only) == 1


def test_movement_report_matches_either_side(client, db, admin, source, destination, item):
    check_in(client, admin, item, source, 10)
    client.post("/api/transactions", headers=auth_headers(admin), json={
        "transaction_type": "transfer", "item_id": str(item.id), "quantity": 4,
        "source_warehouse_id": str(source.id), "destination_warehouse_id": str(destination.id),
    })

    rows = client.get(f"/api/reports/inventory-movement?warehouse_id={destination.id}",
                      headers=auth_headers(admin)).json()["data"]
    assert [r["transaction_type"] for r in rows] == ["transfer"]

    today = datetime.now(timezone.utc).date().isoformat()
    rows = client.get(f"/api/reports/inventory-movement?start_date={today}&end_date={today}",
                      headers=auth_headers(admin)).json()["data"]
    assert len(rows) == 2


def test_valuation_uses_configured_method(client, db, admin, source, item):
    check_in(client, admin, item, source, 10, cost=5)
    check_in(client, admin, item, source, 30, cost=9)

    report = client.get("/api/reports/inventory-valuation", headers=auth_headers(admin)).json()["data"]
    assert report["valuation_method"] == "Last Value"
    assert report["items"][0]["current_stock"] == 40
    assert report["items"][0]["unit_value"] == 9.0
    assert report["total_value"] == 360.0

    client.put("/api/organization-settings", headers=auth_headers(admin),
               json={"inventory_valuation_method": "Average Value"})
    report = client.get("/api/reports/inventory-valuation", headers=auth_headers(admin)).json()["data"]
    assert report["items"][0]["unit_value"] == 8.0
    assert report["total_value"] == 320.0


def test_valuation_as_of_a_past_date(client, db, admin, source, item):
    check_in(client, admin, item, source, 10, cost=5)
    old = db.query(Transaction).one()
    old.created_at = datetime.now(timezone.utc) - timedelta(days=10)
    db.commit()
    check_in(client, admin, item, source, 30, cost=9)

    as_of = (datetime.now(timezone.utc) - timedelta(days=5)).date().isoformat()
    report = client.get(f"/api/reports/inventory-valuation?as_of_date={as_of}",
                        headers=auth_headers(admin)).json()["data"]

    assert report["items"][0]["current_stock"] == 10
    assert report["items"][0]["unit_value"] == 5.0


def test_uncosted_stock_is_left_out_of_valuation(client, db, admin, source, item):
    check_in(client, admin, item, source, 10)

    report = client.get("/api/reports/inventory-valuation", headers=auth_headers(admin)).json()["data"]

    assert report["items"] == []
    assert report["total_value"] == 0


def test_invalid_valuation_method_is_rejected(client, db, admin):
    resp = client.put("/api/organization-settings", headers=auth_headers(admin),
                      json={"inventory_valuation_method": "FIFO"})

    assert resp.status_code == 422


def test_dashboard_summary(client, db, admin, employee, source, item):
    add_stock(db, item, source, 2)
    client.post("/api/requests", headers=auth_headers(employee), json={
        "warehouse_id": str(source.id), "items": [{"item_id": str(item.id), "quantity": 1}],
    })

    summary = client.get("/api/dashboard/summary", headers=auth_headers(admin)).json()["data"]

    assert summary["total_items"] == 1
    assert summary["low_stock_items_count"] == 1
    assert summary["pending_requests_count"] == 1
    assert summary["pending_requests_change"] == 100.0
    assert len(summary["pending_requests"][0]["items"]) == 1


def test_csv_exports(client, db, admin, source, item):
    check_in(client, admin, item, source, 10)

    resp = client.get("/api/export/transactions", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0].startswith("Transaction Code,Type,Item")
    assert "TRX-00001" in lines[1]

    resp = client.get("/api/export/inventory-stock", headers=auth_headers(admin))
    assert "Widget" in resp.text


def test_dashboard_counts_requests_awaiting_transfer(client, db, admin, employee, source, destination, item):
    add_stock(db, item, destination, 30)
    resp = client.post("/api/requests", headers=auth_headers(employee), json={
        "warehouse_id": str(source.id), "items": [{"item_id": str(item.id), "quantity": 5}],
    })
    assert resp.json()["data"]["status"] == "pending-transfer"

    summary = client.get("/api/dashboard/summary", headers=auth_headers(admin)).json()["data"]

    assert summary["pending_requests_count"] == 1
    assert summary["pending_requests"][0]["status"] == "pending-transfer"
