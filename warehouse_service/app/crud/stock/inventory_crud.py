# app/crud/stock/inventory_crud.py
import logging
from datetime import datetime, time, timezone
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import UserToken
from shared.models.users import Users
from ...enum.inventory_enum import TransactionType
from ...enum.transfer_enum import TransferMode, TransferStatus, TransferUpdateType
from ...helpers.code_generator import next_code
from ...helpers.valuation_helper import compute_unit_values
from ...models.masters.items import Item
from ...models.masters.warehouses import Warehouse
from ...models.stock.inventory import Inventory
from ...models.stock.transactions import Transaction
from ...models.transfers.transfers import Transfer, TransferItem, TransferUpdate
from ...schemas.masters.items_schemas import ItemSummary
from ...schemas.stock.inventory_schemas import (
    DisposeOut, DisposeRequest, DisposedInventoryParams, DisposedInventoryRow,
    InventoryOut, InventoryQuantityUpdate, InventoryUpsert)
from ..masters.items_crud import get_item_or_404
from ..masters.warehouses_crud import get_warehouse_or_404
from ..system.organization_settings_crud import get_or_create_settings
from .stock_ledger import adjust_inventory, get_stock_row, insufficient_stock, record_transaction

logger = logging.getLogger(__name__)


def to_inventory_out(row: Inventory) -> InventoryOut:
    return InventoryOut(
        id=row.id,
        item_id=row.item_id,
        warehouse_id=row.warehouse_id,
        quantity=row.quantity,
        last_updated=row.last_updated,
        item=ItemSummary.model_validate(row.item) if row.item else None,
        warehouse_name=row.warehouse.name if row.warehouse else None,
    )


def _inventory_query(db: Session):
    return (
        db.query(Inventory)
        .options(joinedload(Inventory.item), joinedload(Inventory.warehouse))
        .join(Item, Item.id == Inventory.item_id)
        .filter(Item.is_deleted == False)
    )


def get_inventory(db: Session) -> List[InventoryOut]:
    rows = _inventory_query(db).order_by(Item.name.asc()).all()
    return [to_inventory_out(row) for row in rows]


def get_inventory_by_warehouse(db: Session, warehouse_id: UUID) -> List[InventoryOut]:
    get_warehouse_or_404(db, warehouse_id)
    rows = (
        _inventory_query(db)
        .filter(Inventory.warehouse_id == warehouse_id)
        .order_by(Item.name.asc())
        .all()
    )
    return [to_inventory_out(row) for row in rows]


def upsert_inventory(db: Session, payload: InventoryUpsert) -> InventoryOut:
    get_item_or_404(db, payload.item_id)
    get_warehouse_or_404(db, payload.warehouse_id)

    row = get_stock_row(db, payload.item_id, payload.warehouse_id, lock=True)
    if row is None:
        row = Inventory(item_id=payload.item_id, warehouse_id=payload.warehouse_id)
        db.add(row)

    row.quantity = payload.quantity
    row.last_updated = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    logger.info("Inventory for item %s at %s set to %s",
                payload.item_id, payload.warehouse_id, payload.quantity)
    return to_inventory_out(row)


def update_inventory_quantity(db: Session, payload: InventoryQuantityUpdate) -> InventoryOut:
    get_item_or_404(db, payload.item_id)
    get_warehouse_or_404(db, payload.warehouse_id)

    row = get_stock_row(db, payload.item_id, payload.warehouse_id, lock=True)
    if row is None:
        raise ValueError("No inventory record exists for this item in the warehouse")

    row.quantity = payload.quantity
    row.last_updated = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    logger.info("Inventory quantity for item %s at %s overwritten to %s",
                payload.item_id, payload.warehouse_id, payload.quantity)
    return to_inventory_out(row)


# ---------------- Disposal ----------------

def dispose_inventory(db: Session, payload: DisposeRequest, current_user: UserToken) -> DisposeOut:
    item = get_item_or_404(db, payload.item_id)
    warehouse = get_warehouse_or_404(db, payload.warehouse_id)

    row = get_stock_row(db, item.id, warehouse.id, lock=True)
    on_hand = row.quantity if row else 0
    if payload.quantity > on_hand:
        return insufficient_stock(item.name, on_hand, payload.quantity)

    now = datetime.now(timezone.utc)
    transfer = Transfer(
        transfer_code=next_code(db, Transfer.transfer_code, "DISP"),
        source_warehouse_id=warehouse.id,
        destination_warehouse_id=None,
        initiated_by=current_user.user_id,
        approved_by=current_user.user_id,
        status=TransferStatus.DISPOSED.value,
        transfer_mode=TransferMode.DISPOSAL.value,
        disposal_reason=payload.reason,
        disposal_date=now,
        notes=payload.notes,
    )
    db.add(transfer)
    db.flush()

    db.add(TransferItem(
        transfer_id=transfer.id,
        item_id=item.id,
        requested_quantity=payload.quantity,
        approved_quantity=payload.quantity,
        actual_quantity=payload.quantity,
        notes=payload.notes,
    ))
    db.add(TransferUpdate(
        transfer_id=transfer.id,
        updated_by=current_user.user_id,
        status=TransferStatus.DISPOSED.value,
        update_type=TransferUpdateType.STATUS_CHANGE.value,
        description=f"Disposed {payload.quantity} x {item.name}: {payload.reason}",
    ))

    txn = record_transaction(
        db,
        transaction_type=TransactionType.DISPOSAL.value,
        item_id=item.id,
        quantity=payload.quantity,
        user_id=current_user.user_id,
        source_warehouse_id=warehouse.id,
        transfer_id=transfer.id,
    )
    row = adjust_inventory(db, item.id, warehouse.id, -payload.quantity, item.name)

    db.commit()
    logger.info("Disposed %s x %s from %s as %s", payload.quantity,
                item.sku, warehouse.name, transfer.transfer_code)
    return DisposeOut(
        transfer_id=transfer.id,
        transfer_code=transfer.transfer_code,
        transaction_code=txn.transaction_code,
        remaining_quantity=row.quantity,
    )


def get_disposed_inventory(db: Session, params: DisposedInventoryParams) -> List[DisposedInventoryRow]:
    query = (
        db.query(Transfer, TransferItem, Item, Warehouse)
        .join(TransferItem, TransferItem.transfer_id == Transfer.id)
        .join(Item, Item.id == TransferItem.item_id)
        .join(Warehouse, Warehouse.id == Transfer.source_warehouse_id)
        .filter(Transfer.status == TransferStatus.DISPOSED.value)
    )

    if params.warehouse_id:
        query = query.filter(Transfer.source_warehouse_id == params.warehouse_id)
    if params.item_id:
        query = query.filter(TransferItem.item_id == params.item_id)
    if params.approved_by:
        query = query.filter(Transfer.approved_by == params.approved_by)
    if params.start_date:
        query = query.filter(Transfer.disposal_date >= datetime.combine(params.start_date, time.min))
    if params.end_date:
        query = query.filter(Transfer.disposal_date <= datetime.combine(params.end_date, time.max))

    rows = query.order_by(Transfer.disposal_date.desc()).all()

    settings = get_or_create_settings(db)
    check_ins = db.query(Transaction).filter(
        Transaction.transaction_type == TransactionType.CHECK_IN.value).all()
    unit_values = compute_unit_values(
        check_ins, settings.inventory_valuation_method, datetime.now(timezone.utc))

    approver_ids = {transfer.approved_by for transfer, *_ in rows if transfer.approved_by}
    approvers = {
        user.id: user.name
        for user in db.query(Users).filter(Users.id.in_(approver_ids)).all()
    } if approver_ids else {}

    result = []
    for transfer, transfer_item, item, warehouse in rows:
        quantity = transfer_item.actual_quantity or transfer_item.requested_quantity
        unit_value = unit_values.get(item.id, 0.0)
        result.append(DisposedInventoryRow(
            transfer_id=transfer.id,
            transfer_code=transfer.transfer_code,
            item_id=item.id,
            item_name=item.name,
            sku=item.sku,
            warehouse_id=warehouse.id,
            warehouse_name=warehouse.name,
            quantity=quantity,
            unit_value=round(unit_value, 2),
            total_value=round(unit_value * quantity, 2),
            disposal_reason=transfer.disposal_reason,
            disposal_date=transfer.disposal_date,
            approved_by=transfer.approved_by,
            approved_by_name=approvers.get(transfer.approved_by),
        ))
    return result
