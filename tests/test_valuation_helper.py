import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from warehouse_service.app.helpers.valuation_helper import (
    compute_unit_values, quantity_delta, replay_quantity)

ITEM = uuid.uuid4()
MAIN = uuid.uuid4()
OTHER = uuid.uuid4()
T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def txn(kind, quantity, minutes=0, cost=None, source=None, destination=None,
        status="completed", item_id=ITEM):
    return SimpleNamespace(
        transaction_type=kind,
        item_id=item_id,
        quantity=quantity,
        cost=cost,
        source_warehouse_id=source,
        destination_warehouse_id=destination,
        status=status,
        created_at=T0 + timedelta(minutes=minutes),
    )


@pytest.fixture
def ledger():
    return [
        txn("check-in", 10, 0, cost=5, destination=MAIN),
        txn("check-in", 30, 10, cost=9, destination=MAIN),
        txn("check-in", 5, 20, destination=MAIN),  # no cost recorded
        txn("check-in", 20, 30, cost=7, destination=OTHER),
    ]


def test_last_value_uses_newest_costed_check_in(ledger):
    values = compute_unit_values(ledger, "Last Value", T0 + timedelta(days=1))
    assert values[ITEM] == pytest.approx(7.0)


def test_earliest_value_uses_oldest_costed_check_in(ledger):
    values = compute_unit_values(ledger, "Earliest Value", T0 + timedelta(days=1))
    assert values[ITEM] == pytest.approx(5.0)


def test_average_value_is_quantity_weighted(ledger):
    values = compute_unit_values(ledger, "Average Value", T0 + timedelta(days=1))
    expected = (10 * 5 + 30 * 9 + 20 * 7) / (10 + 30 + 20)
    assert values[ITEM] == pytest.approx(expected)


def test_as_of_excludes_later_check_ins(ledger):
    values = compute_unit_values(ledger, "Last Value", T0 + timedelta(minutes=15))
    assert values[ITEM] == pytest.approx(9.0)


def test_item_without_costed_check_in_has_no_value():
    rows = [txn("check-in", 4, 0, destination=MAIN)]
    assert compute_unit_values(rows, "Average Value", T0 + timedelta(days=1)) == {}


def test_naive_as_of_compares_with_aware_rows(ledger):
    values = compute_unit_values(ledger, "Earliest Value", datetime(2024, 3, 1, 9, 5))
    assert values[ITEM] == pytest.approx(5.0)


def test_unknown_method_is_rejected(ledger):
    with pytest.raises(ValueError):
        compute_unit_values(ledger, "FIFO", T0)


def test_transfer_counts_at_destination_only_when_completed():
    in_transit = txn("transfer", 4, source=MAIN, destination=OTHER, status="in-transit")
    completed = txn("transfer", 4, source=MAIN, destination=OTHER, status="completed")
    cancelled = txn("transfer", 4, source=MAIN, destination=OTHER, status="cancelled")

    assert quantity_delta(in_transit, MAIN) == -4
    assert quantity_delta(in_transit, OTHER) == 0
    assert quantity_delta(completed, OTHER) == 4
    assert quantity_delta(cancelled, MAIN) == 0


def test_replay_quantity_rebuilds_balance():
    rows = [
        txn("check-in", 50, 0, cost=2, destination=MAIN),
        txn("issue", 5, 1, source=MAIN),
        txn("check-out", 3, 2, source=MAIN),
        txn("disposal", 2, 3, source=MAIN),
        txn("transfer", 10, 4, source=MAIN, destination=OTHER),
        txn("check-in", 99, 5, destination=MAIN, item_id=uuid.uuid4()),
        txn("check-in", 7, 60 * 24 * 3, destination=MAIN),
    ]
    as_of = T0 + timedelta(days=1)

    assert replay_quantity(rows, ITEM, MAIN, as_of) == 30
    assert replay_quantity(rows, ITEM, OTHER, as_of) == 10
