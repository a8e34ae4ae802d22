# app/crud/stock/stock_ledger.py
"""Primitives shared by every flow that moves stock.

None of these commit; the calling crud function owns the unit of work and
commits once after all of its checks have passed.
"""
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode
from ...helpers.code_generator import next_code
from ...models.stock.inventory import Inventory
from ...models.stock.transactions import Transaction

logger = logging.getLogger(__name__)


def get_stock_row(db: Session, item_id: UUID, warehouse_id: UUID, lock: bool = False) -> Optional[Inventory]:
    query = db.query(Inventory).filter(
        Inventory.item_id == item_id,
        Inventory.warehouse_id == warehouse_id
    )
    if lock:
        query = query.with_for_update()
    return query.first()


def available_quantity(db: Session, item_id: UUID, warehouse_id: UUID) -> int:
    row = get_stock_row(db, item_id, warehouse_id)
    return row.quantity if row else 0


def insufficient_stock(item_label: str, available: int, needed: int):
    return error_response(
        message=f"Insufficient stock for {item_label}: available {available}, required {needed}",
        status_code=AppStatusCode.INSUFFICIENT_STOCK,
        http_status=400
    )


def adjust_inventory(db: Session, item_id: UUID, warehouse_id: UUID, delta: int,
                     item_label: Optional[str] = None) -> Inventory:
    """Add ``delta`` to the (item, warehouse) balance, creating the row on first receipt."""
    row = get_stock_row(db, item_id, warehouse_id, lock=True)

    if row is None:
        if delta < 0:
            return insufficient_stock(item_label or str(item_id), 0, -delta)
        row = Inventory(item_id=item_id, warehouse_id=warehouse_id, quantity=0)
        db.add(row)

    if row.quantity + delta < 0:
        return insufficient_stock(item_label or str(item_id), row.quantity, -delta)

    row.quantity = row.quantity + delta
    row.last_updated = datetime.now(timezone.utc)
    db.flush()
    return row


def record_transaction(db: Session, *, transaction_type: str, item_id: UUID, quantity: int,
                       user_id: UUID, status: str = "completed", **fields) -> Transaction:
    """Append a ledger row with the next TRX code."""
    now = datetime.now(timezone.utc)
    txn = Transaction(
        transaction_code=next_code(db, Transaction.transaction_code, "TRX", width=5),
        transaction_type=transaction_type,
        item_id=item_id,
        quantity=quantity,
        user_id=user_id,
        status=status,
        created_at=now,
        completed_at=now if status == "completed" else None,
        **fields
    )
    db.add(txn)
    db.flush()
    logger.info("Ledger %s %s item=%s qty=%s", txn.transaction_code,
                transaction_type, item_id, quantity)
    return txn
