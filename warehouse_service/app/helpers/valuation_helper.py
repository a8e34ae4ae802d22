"""Historical inventory valuation.

Both functions are pure: they take ledger rows (ORM ``Transaction`` objects or
anything exposing the same attributes) and never touch the session, so the
report crud can feed them a single bulk query.
"""
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from ..enum.inventory_enum import TransactionStatus, TransactionType, ValuationMethod


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Postgres hands back aware datetimes and SQLite naive ones; compare in naive UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _has_cost(txn) -> bool:
    return txn.cost is not None and Decimal(str(txn.cost)) > 0


def _costed_check_ins(transactions: Iterable[Any], as_of: datetime) -> Dict[Any, list]:
    cutoff = to_naive_utc(as_of)
    by_item = defaultdict(list)

    for txn in transactions:
        if txn.transaction_type != TransactionType.CHECK_IN.value:
            continue
        if not _has_cost(txn) or not txn.quantity:
            continue
        created_at = to_naive_utc(txn.created_at)
        if created_at is None or created_at > cutoff:
            continue
        by_item[txn.item_id].append((created_at, txn))

    for rows in by_item.values():
        rows.sort(key=lambda row: row[0])

    return by_item


def compute_unit_values(transactions: Iterable[Any], method: str, as_of: datetime) -> Dict[Any, float]:
    """
    Unit value per item from check-ins recorded on or before ``as_of``.

    Last Value takes the newest costed check-in, Earliest Value the oldest and
    Average Value the quantity weighted mean. Items with no costed check-in are
    absent from the result.
    """
    method = ValuationMethod(method)
    unit_values = {}

    for item_id, rows in _costed_check_ins(transactions, as_of).items():
        if method == ValuationMethod.LAST_VALUE:
            value = Decimal(str(rows[-1][1].cost))
        elif method == ValuationMethod.EARLIEST_VALUE:
            value = Decimal(str(rows[0][1].cost))
        else:
            total_cost = sum(Decimal(str(txn.cost)) * txn.quantity for _, txn in rows)
            total_qty = sum(txn.quantity for _, txn in rows)
            value = total_cost / total_qty

        unit_values[item_id] = float(value)

    return unit_values


def quantity_delta(txn, warehouse_id) -> int:
    """Signed effect of one ledger row on a warehouse's stock."""
    kind = txn.transaction_type
    qty = txn.quantity or 0

    if kind == TransactionType.CHECK_IN.value:
        return qty if txn.destination_warehouse_id == warehouse_id else 0

    if kind in (TransactionType.ISSUE.value, TransactionType.CHECK_OUT.value,
                TransactionType.DISPOSAL.value):
        return -qty if txn.source_warehouse_id == warehouse_id else 0

    if kind == TransactionType.TRANSFER.value:
        if txn.status == TransactionStatus.CANCELLED.value:
            return 0
        delta = 0
        if txn.source_warehouse_id == warehouse_id:
            delta -= qty
        if (txn.destination_warehouse_id == warehouse_id
                and txn.status == TransactionStatus.COMPLETED.value):
            delta += qty
        return delta

    return 0


def replay_quantity(transactions: Iterable[Any], item_id, warehouse_id, as_of: datetime) -> int:
    """On-hand quantity of ``item_id`` at ``warehouse_id`` rebuilt from the ledger."""
    cutoff = to_naive_utc(as_of)
    total = 0

    for txn in transactions:
        if txn.item_id != item_id:
            continue
        created_at = to_naive_utc(txn.created_at)
        if created_at is None or created_at > cutoff:
            continue
        total += quantity_delta(txn, warehouse_id)

    return total
