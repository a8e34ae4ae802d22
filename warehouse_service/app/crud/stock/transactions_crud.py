# app/crud/stock/transactions_crud.py
import logging
from datetime import datetime, timezone
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.utils.app_status_code import AppStatusCode
from ...enum.inventory_enum import TransactionStatus, TransactionType
from ...models.stock.transactions import Transaction
from ...schemas.stock.transactions_schemas import TransactionCreate, TransactionOut
from ..masters.items_crud import get_item_or_404
from ..masters.warehouses_crud import get_warehouse_or_404
from .stock_ledger import adjust_inventory, available_quantity, insufficient_stock, record_transaction

logger = logging.getLogger(__name__)


def to_transaction_out(txn: Transaction) -> TransactionOut:
    return TransactionOut(
        id=txn.id,
        transaction_code=txn.transaction_code,
        transaction_type=txn.transaction_type,
        item_id=txn.item_id,
        item_name=txn.item.name if txn.item else None,
        sku=txn.item.sku if txn.item else None,
        quantity=txn.quantity,
        source_warehouse_id=txn.source_warehouse_id,
        source_warehouse_name=txn.source_warehouse.name if txn.source_warehouse else None,
        destination_warehouse_id=txn.destination_warehouse_id,
        destination_warehouse_name=txn.destination_warehouse.name if txn.destination_warehouse else None,
        request_id=txn.request_id,
        transfer_id=txn.transfer_id,
        user_id=txn.user_id,
        user_name=txn.user.name if txn.user else None,
        requester_id=txn.requester_id,
        status=txn.status,
        cost=float(txn.cost) if txn.cost is not None else None,
        supplier_name=txn.supplier_name,
        po_number=txn.po_number,
        delivery_challan_number=txn.delivery_challan_number,
        check_in_date=txn.check_in_date,
        created_at=txn.created_at,
        completed_at=txn.completed_at,
    )


def transaction_query(db: Session):
    return db.query(Transaction).options(
        joinedload(Transaction.item),
        joinedload(Transaction.source_warehouse),
        joinedload(Transaction.destination_warehouse),
        joinedload(Transaction.user),
    )


def get_transactions(db: Session) -> List[TransactionOut]:
    rows = transaction_query(db).order_by(Transaction.created_at.desc()).all()
    return [to_transaction_out(row) for row in rows]


def get_transactions_by_type(db: Session, transaction_type: str) -> List[TransactionOut]:
    try:
        kind = TransactionType(transaction_type)
    except ValueError:
        return error_response(
            message=f"Invalid transaction type '{transaction_type}'",
            status_code=AppStatusCode.INVALID_INPUT
        )

    rows = (
        transaction_query(db)
        .filter(Transaction.transaction_type == kind.value)
        .order_by(Transaction.created_at.desc())
        .all()
    )
    return [to_transaction_out(row) for row in rows]


def get_transactions_by_warehouse(db: Session, warehouse_id: UUID) -> List[TransactionOut]:
    rows = (
        transaction_query(db)
        .filter(
            (Transaction.source_warehouse_id == warehouse_id)
            | (Transaction.destination_warehouse_id == warehouse_id)
        )
        .order_by(Transaction.created_at.desc())
        .all()
    )
    return [to_transaction_out(row) for row in rows]


def get_transaction_or_404(db: Session, transaction_id: UUID) -> Transaction:
    txn = transaction_query(db).filter(Transaction.id == transaction_id).first()
    if not txn:
        return not_found("Transaction")
    return txn


# ---------------- Create ----------------

def create_transaction(db: Session, payload: TransactionCreate, current_user: UserToken) -> TransactionOut:
    kind = payload.transaction_type

    if kind != TransactionType.CHECK_IN and not current_user.is_manager:
        return forbidden("Only managers and admins can record this transaction type")

    item = get_item_or_404(db, payload.item_id)
    common = dict(
        transaction_type=kind.value,
        item_id=item.id,
        quantity=payload.quantity,
        user_id=current_user.user_id,
        request_id=payload.request_id,
        requester_id=payload.requester_id,
    )

    if kind == TransactionType.CHECK_IN:
        if not payload.destination_warehouse_id:
            raise ValueError("Destination warehouse is required for check-in")
        get_warehouse_or_404(db, payload.destination_warehouse_id)

        txn = record_transaction(
            db, **common,
            destination_warehouse_id=payload.destination_warehouse_id,
            cost=payload.cost,
            supplier_name=payload.supplier_name,
            po_number=payload.po_number,
            delivery_challan_number=payload.delivery_challan_number,
            check_in_date=payload.check_in_date,
        )
        adjust_inventory(db, item.id, payload.destination_warehouse_id, payload.quantity, item.name)

    elif kind in (TransactionType.ISSUE, TransactionType.CHECK_OUT):
        if not payload.source_warehouse_id:
            raise ValueError("Source warehouse is required for this transaction type")
        get_warehouse_or_404(db, payload.source_warehouse_id)

        on_hand = available_quantity(db, item.id, payload.source_warehouse_id)
        if on_hand < payload.quantity:
            return insufficient_stock(item.name, on_hand, payload.quantity)

        txn = record_transaction(db, **common, source_warehouse_id=payload.source_warehouse_id)
        adjust_inventory(db, item.id, payload.source_warehouse_id, -payload.quantity, item.name)

    elif kind == TransactionType.TRANSFER:
        source_id, destination_id = payload.source_warehouse_id, payload.destination_warehouse_id
        if not source_id or not destination_id:
            raise ValueError("Source and destination warehouses are required for transfer")
        if source_id == destination_id:
            raise ValueError("Source and destination warehouses must be different")
        get_warehouse_or_404(db, source_id)
        get_warehouse_or_404(db, destination_id)

        on_hand = available_quantity(db, item.id, source_id)
        if on_hand < payload.quantity:
            return insufficient_stock(item.name, on_hand, payload.quantity)

        status = (
            TransactionStatus.COMPLETED.value
            if payload.status == TransactionStatus.COMPLETED
            else TransactionStatus.IN_TRANSIT.value
        )
        txn = record_transaction(
            db, **common, status=status,
            source_warehouse_id=source_id,
            destination_warehouse_id=destination_id,
        )
        adjust_inventory(db, item.id, source_id, -payload.quantity, item.name)
        if status == TransactionStatus.COMPLETED.value:
            adjust_inventory(db, item.id, destination_id, payload.quantity, item.name)

    else:
        # disposal has its own endpoint which also writes the disposal transfer
        raise ValueError("Use the inventory disposal endpoint to dispose stock")

    db.commit()
    logger.info("Recorded %s %s by %s", txn.transaction_code, kind.value, current_user.user_id)
    return to_transaction_out(get_transaction_or_404(db, txn.id))


# ---------------- Status ----------------

def update_transaction_status(db: Session, transaction_id: UUID, status: TransactionStatus,
                              current_user: UserToken) -> TransactionOut:
    txn = get_transaction_or_404(db, transaction_id)

    if txn.status == status.value:
        return to_transaction_out(txn)

    if txn.status == TransactionStatus.COMPLETED.value:
        return error_response(
            message="A completed transaction cannot change status",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )
    if txn.status == TransactionStatus.CANCELLED.value:
        return error_response(
            message="A cancelled transaction cannot change status",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    is_transfer = txn.transaction_type == TransactionType.TRANSFER.value

    if status == TransactionStatus.COMPLETED:
        if is_transfer and txn.destination_warehouse_id:
            adjust_inventory(db, txn.item_id, txn.destination_warehouse_id, txn.quantity)
        txn.completed_at = datetime.now(timezone.utc)

    elif status == TransactionStatus.CANCELLED:
        if is_transfer and txn.source_warehouse_id:
            adjust_inventory(db, txn.item_id, txn.source_warehouse_id, txn.quantity)

    txn.status = status.value
    db.commit()
    logger.info("Transaction %s moved to %s by %s", txn.transaction_code,
                status.value, current_user.user_id)
    return to_transaction_out(get_transaction_or_404(db, transaction_id))
