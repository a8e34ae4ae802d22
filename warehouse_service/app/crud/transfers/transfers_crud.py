# app/crud/transfers/transfers_crud.py
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload, selectinload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from ...enum.inventory_enum import TransactionType
from ...enum.transfer_enum import RejectedGoodsStatus, TransferStatus, TransferUpdateType
from ...helpers.access_helper import manages_warehouse
from ...helpers.code_generator import next_code
from ...helpers.transfer_status_helper import (
    InvalidTransition, TransitionNotPermitted, allowed_targets, check_transition)
from ...models.masters.items import Item
from ...models.transfers.rejected_goods import RejectedGoods
from ...models.transfers.transfers import Transfer, TransferItem, TransferUpdate
from ...schemas.transfers.transfers_schemas import (
    DESTINATION_FIELDS, SOURCE_FIELDS, TransferCreate, TransferDetailOut,
    TransferItemOut, TransferItemPatch, TransferOut, TransferPatch, TransferUpdateOut)
from ..masters.warehouses_crud import get_warehouse_or_404
from ..stock.stock_ledger import adjust_inventory, available_quantity, insufficient_stock, record_transaction

logger = logging.getLogger(__name__)

OUT_FIELDS = [name for name in TransferOut.model_fields
              if name not in ("source_warehouse_name", "destination_warehouse_name",
                              "initiated_by_name", "item_count")]


def _now():
    return datetime.now(timezone.utc)


# ---------------- Read ----------------

def _transfer_query(db: Session):
    return db.query(Transfer).options(
        joinedload(Transfer.source_warehouse),
        joinedload(Transfer.destination_warehouse),
        selectinload(Transfer.items).joinedload(TransferItem.item),
        selectinload(Transfer.updates),
    )


def _user_names(db: Session, transfers: List[Transfer]) -> Dict[UUID, str]:
    ids = {t.initiated_by for t in transfers}
    if not ids:
        return {}
    return {u.id: u.name for u in db.query(Users).filter(Users.id.in_(ids)).all()}


def to_transfer_out(transfer: Transfer, names: Dict[UUID, str]) -> TransferOut:
    data = {name: getattr(transfer, name) for name in OUT_FIELDS}
    return TransferOut(
        **data,
        source_warehouse_name=transfer.source_warehouse.name if transfer.source_warehouse else None,
        destination_warehouse_name=(
            transfer.destination_warehouse.name if transfer.destination_warehouse else None),
        initiated_by_name=names.get(transfer.initiated_by),
        item_count=len(transfer.items),
    )


def to_transfer_detail(db: Session, transfer: Transfer) -> TransferDetailOut:
    summary = to_transfer_out(transfer, _user_names(db, [transfer]))
    return TransferDetailOut(
        **summary.model_dump(),
        items=[
            TransferItemOut(
                id=ti.id,
                item_id=ti.item_id,
                item_name=ti.item.name if ti.item else None,
                sku=ti.item.sku if ti.item else None,
                requested_quantity=ti.requested_quantity,
                approved_quantity=ti.approved_quantity,
                actual_quantity=ti.actual_quantity,
                condition=ti.condition,
                notes=ti.notes,
            )
            for ti in transfer.items
        ],
        updates=[TransferUpdateOut.model_validate(u) for u in transfer.updates],
        next_statuses=allowed_targets(transfer.status),
    )


def get_transfers(db: Session, status: Optional[str] = None) -> List[TransferOut]:
    query = _transfer_query(db)
    if status:
        try:
            query = query.filter(Transfer.status == TransferStatus(status).value)
        except ValueError:
            return error_response(
                message=f"Invalid transfer status '{status}'",
                status_code=AppStatusCode.INVALID_INPUT
            )

    transfers = query.order_by(Transfer.created_at.desc()).all()
    names = _user_names(db, transfers)
    return [to_transfer_out(t, names) for t in transfers]


def get_transfer_or_404(db: Session, transfer_id: UUID) -> Transfer:
    transfer = _transfer_query(db).filter(Transfer.id == transfer_id).first()
    if not transfer:
        return not_found("Transfer")
    return transfer


def get_transfer(db: Session, transfer_id: UUID) -> TransferDetailOut:
    return to_transfer_detail(db, get_transfer_or_404(db, transfer_id))


# ---------------- Create ----------------

def _log_update(db: Session, transfer: Transfer, user_id: UUID, update_type: str,
                description: str, details: Optional[dict] = None):
    db.add(TransferUpdate(
        transfer_id=transfer.id,
        updated_by=user_id,
        status=transfer.status,
        update_type=update_type,
        description=description,
        details=details,
    ))


def create_transfer(db: Session, payload: TransferCreate, current_user: UserToken) -> TransferDetailOut:
    if payload.source_warehouse_id == payload.destination_warehouse_id:
        raise ValueError("Source and destination warehouses must be different")

    source = get_warehouse_or_404(db, payload.source_warehouse_id)
    destination = get_warehouse_or_404(db, payload.destination_warehouse_id)

    if not manages_warehouse(db, current_user, source.id, source):
        return forbidden("You can only create transfers from warehouses you manage")

    requested = defaultdict(int)
    for line in payload.items:
        requested[line.item_id] += line.requested_quantity

    items = {i.id: i for i in db.query(Item).filter(
        Item.id.in_(list(requested)), Item.is_deleted == False).all()}
    for item_id, quantity in requested.items():
        if item_id not in items:
            return not_found("Item")
        on_hand = available_quantity(db, item_id, source.id)
        if on_hand < quantity:
            return insufficient_stock(items[item_id].name, on_hand, quantity)

    transfer = Transfer(
        transfer_code=next_code(db, Transfer.transfer_code, "TRF"),
        source_warehouse_id=source.id,
        destination_warehouse_id=destination.id,
        initiated_by=current_user.user_id,
        status=TransferStatus.PENDING.value,
        **payload.model_dump(exclude={"items", "source_warehouse_id", "destination_warehouse_id"}),
    )
    transfer.transfer_mode = payload.transfer_mode.value
    db.add(transfer)
    db.flush()

    for line in payload.items:
        db.add(TransferItem(
            transfer_id=transfer.id,
            item_id=line.item_id,
            requested_quantity=line.requested_quantity,
            notes=line.notes,
        ))

    _log_update(db, transfer, current_user.user_id, TransferUpdateType.STATUS_CHANGE.value,
                f"Transfer created from {source.name} to {destination.name}")
    db.commit()
    logger.info("Transfer %s created by %s", transfer.transfer_code, current_user.user_id)
    return get_transfer(db, transfer.id)


# ---------------- Status side effects ----------------

def _require_source_stock(db: Session, transfer: Transfer):
    needed = defaultdict(int)
    for ti in transfer.items:
        needed[ti.item_id] += ti.shipped_quantity
    for ti in transfer.items:
        on_hand = available_quantity(db, ti.item_id, transfer.source_warehouse_id)
        if on_hand < needed[ti.item_id]:
            label = ti.item.name if ti.item else str(ti.item_id)
            return insufficient_stock(label, on_hand, needed[ti.item_id])


def _complete(db: Session, transfer: Transfer, user_id: UUID):
    _require_source_stock(db, transfer)

    for ti in transfer.items:
        label = ti.item.name if ti.item else None
        adjust_inventory(db, ti.item_id, transfer.source_warehouse_id, -ti.shipped_quantity, label)
        record_transaction(
            db, transaction_type=TransactionType.CHECK_OUT.value, item_id=ti.item_id,
            quantity=ti.shipped_quantity, user_id=user_id,
            source_warehouse_id=transfer.source_warehouse_id, transfer_id=transfer.id,
        )
        if ti.received_quantity > 0:
            adjust_inventory(db, ti.item_id, transfer.destination_warehouse_id, ti.received_quantity, label)
            record_transaction(
                db, transaction_type=TransactionType.CHECK_IN.value, item_id=ti.item_id,
                quantity=ti.received_quantity, user_id=user_id,
                destination_warehouse_id=transfer.destination_warehouse_id, transfer_id=transfer.id,
            )

    transfer.actual_arrival_date = _now()
    if transfer.received_date is None:
        transfer.received_date = transfer.actual_arrival_date


def _request_return(db: Session, transfer: Transfer, user_id: UUID, reason: Optional[str]):
    """Goods refused at the destination leave the source books until returned or disposed."""
    reason = reason or transfer.rejection_reason or transfer.return_reason
    if not reason:
        raise ValueError("A rejection reason is required")

    _require_source_stock(db, transfer)

    for ti in transfer.items:
        label = ti.item.name if ti.item else None
        adjust_inventory(db, ti.item_id, transfer.source_warehouse_id, -ti.shipped_quantity, label)
        record_transaction(
            db, transaction_type=TransactionType.CHECK_OUT.value, item_id=ti.item_id,
            quantity=ti.shipped_quantity, user_id=user_id,
            source_warehouse_id=transfer.source_warehouse_id, transfer_id=transfer.id,
        )
        db.add(RejectedGoods(
            transfer_id=transfer.id,
            item_id=ti.item_id,
            quantity=ti.shipped_quantity,
            rejection_reason=reason,
            rejected_by=user_id,
            warehouse_id=transfer.destination_warehouse_id,
            status=RejectedGoodsStatus.REJECTED.value,
        ))

    transfer.rejection_reason = reason
    transfer.rejected_by = user_id
    transfer.rejected_date = _now()


def _rejected_goods(db: Session, transfer: Transfer) -> List[RejectedGoods]:
    return db.query(RejectedGoods).filter(RejectedGoods.transfer_id == transfer.id).all()


def _return_to_source(db: Session, transfer: Transfer, user_id: UUID):
    goods = [g for g in _rejected_goods(db, transfer)
             if g.status == RejectedGoodsStatus.REJECTED.value]
    # only goods still awaiting return go back on the source books
    for g in goods:
        adjust_inventory(db, g.item_id, transfer.source_warehouse_id, g.quantity)
        record_transaction(
            db, transaction_type=TransactionType.CHECK_IN.value, item_id=g.item_id,
            quantity=g.quantity, user_id=user_id,
            destination_warehouse_id=transfer.source_warehouse_id, transfer_id=transfer.id,
        )
        g.status = RejectedGoodsStatus.RETURNED.value

    transfer.return_delivered_date = transfer.return_delivered_date or _now()


def _dispose(db: Session, transfer: Transfer, reason: Optional[str]):
    if not reason:
        raise ValueError("A disposal reason is required")
    for g in _rejected_goods(db, transfer):
        if g.status == RejectedGoodsStatus.REJECTED.value:
            g.status = RejectedGoodsStatus.DISPOSED.value
    transfer.disposal_reason = reason
    transfer.disposal_date = _now()


def change_status(db: Session, transfer: Transfer, target: TransferStatus,
                  current_user: UserToken, reason: Optional[str] = None,
                  extra: Optional[dict] = None) -> Transfer:
    """Validate and apply one lifecycle step. Does not commit."""
    current = transfer.status
    manages_source = manages_warehouse(
        db, current_user, transfer.source_warehouse_id, transfer.source_warehouse)
    manages_destination = manages_warehouse(
        db, current_user, transfer.destination_warehouse_id, transfer.destination_warehouse)

    try:
        check_transition(current, target.value, current_user.is_admin,
                         manages_source, manages_destination)
    except InvalidTransition as exc:
        logger.warning("Transfer %s: %s", transfer.transfer_code, exc)
        return error_response(
            message=str(exc),
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )
    except TransitionNotPermitted as exc:
        logger.warning("Transfer %s: %s (user %s)", transfer.transfer_code, exc, current_user.user_id)
        return forbidden(str(exc))

    user_id = current_user.user_id
    extra = extra or {}

    if target == TransferStatus.APPROVED:
        transfer.approved_by = user_id
    elif target == TransferStatus.IN_TRANSIT:
        transfer.actual_shipment_date = _now()
    elif target == TransferStatus.COMPLETED:
        _complete(db, transfer, user_id)
    elif target == TransferStatus.REJECTED:
        transfer.rejection_reason = reason or transfer.rejection_reason
        transfer.rejected_by = user_id
        transfer.rejected_date = _now()
    elif target == TransferStatus.RETURN_REQUESTED:
        _request_return(db, transfer, user_id, reason)
    elif target == TransferStatus.RETURN_APPROVED:
        transfer.return_reason = reason or transfer.return_reason
    elif target == TransferStatus.DISPOSED:
        _dispose(db, transfer, reason)
    elif target == TransferStatus.RETURN_SHIPPED:
        transfer.return_courier_name = extra.get("courier_name") or transfer.return_courier_name
        transfer.return_tracking_number = extra.get("tracking_number") or transfer.return_tracking_number
        transfer.return_shipped_date = extra.get("shipped_date") or _now()
    elif target == TransferStatus.RETURNED:
        if extra.get("delivered_date"):
            transfer.return_delivered_date = extra["delivered_date"]
        _return_to_source(db, transfer, user_id)

    transfer.status = target.value
    _log_update(
        db, transfer, user_id, TransferUpdateType.STATUS_CHANGE.value,
        f"Status changed from {current} to {target.value}" + (f": {reason}" if reason else ""),
        {"from": current, "to": target.value},
    )
    logger.info("Transfer %s moved %s -> %s by %s", transfer.transfer_code,
                current, target.value, user_id)
    return transfer


# ---------------- Update ----------------

def patch_transfer(db: Session, transfer_id: UUID, payload: TransferPatch,
                   current_user: UserToken) -> TransferDetailOut:
    transfer = get_transfer_or_404(db, transfer_id)
    data = payload.model_dump(exclude_unset=True)
    target = data.pop("status", None)
    notes = data.pop("notes", None)

    manages_source = manages_warehouse(
        db, current_user, transfer.source_warehouse_id, transfer.source_warehouse)
    manages_destination = manages_warehouse(
        db, current_user, transfer.destination_warehouse_id, transfer.destination_warehouse)

    source_changes = {k: v for k, v in data.items() if k in SOURCE_FIELDS}
    destination_changes = {k: v for k, v in data.items() if k in DESTINATION_FIELDS}

    if source_changes and not manages_source:
        return forbidden("Only the source warehouse manager can update shipment details")
    if destination_changes and not manages_destination:
        return forbidden("Only the destination warehouse manager can update receipt details")
    if notes is not None and not (manages_source or manages_destination):
        return forbidden("You do not manage either warehouse of this transfer")

    for key, value in {**source_changes, **destination_changes}.items():
        setattr(transfer, key, value.value if hasattr(value, "value") else value)
    if notes is not None:
        transfer.notes = notes

    if source_changes:
        _log_update(db, transfer, current_user.user_id, TransferUpdateType.SHIPMENT_INFO.value,
                    "Shipment details updated", {"fields": sorted(source_changes)})
    if destination_changes:
        _log_update(db, transfer, current_user.user_id, TransferUpdateType.RECEIPT_INFO.value,
                    "Receipt details updated", {"fields": sorted(destination_changes)})
    if notes is not None:
        _log_update(db, transfer, current_user.user_id, TransferUpdateType.NOTE.value, notes)

    if target is not None and TransferStatus(target).value != transfer.status:
        reason = None
        if target == TransferStatus.REJECTED or target == TransferStatus.RETURN_REQUESTED:
            reason = destination_changes.get("rejection_reason") or transfer.rejection_reason
        elif target == TransferStatus.RETURN_APPROVED:
            reason = destination_changes.get("return_reason") or transfer.return_reason
        change_status(db, transfer, TransferStatus(target), current_user, reason=reason)

    db.commit()
    return get_transfer(db, transfer_id)


def patch_transfer_item(db: Session, transfer_id: UUID, item_id: UUID,
                        payload: TransferItemPatch, current_user: UserToken) -> TransferDetailOut:
    transfer = get_transfer_or_404(db, transfer_id)
    line = next((ti for ti in transfer.items if ti.id == item_id or ti.item_id == item_id), None)
    if not line:
        return not_found("Transfer item")

    data = payload.model_dump(exclude_unset=True)
    manages_source = manages_warehouse(
        db, current_user, transfer.source_warehouse_id, transfer.source_warehouse)
    manages_destination = manages_warehouse(
        db, current_user, transfer.destination_warehouse_id, transfer.destination_warehouse)

    if "approved_quantity" in data:
        if transfer.status not in (TransferStatus.PENDING.value, TransferStatus.APPROVED.value):
            raise ValueError("Approved quantity can only change before shipment")
        if not (manages_source or manages_destination):
            return forbidden("You do not manage either warehouse of this transfer")
        if data["approved_quantity"] is not None and data["approved_quantity"] > line.requested_quantity:
            raise ValueError("Approved quantity cannot exceed the requested quantity")

    if {"actual_quantity", "condition"} & data.keys():
        if transfer.status != TransferStatus.IN_TRANSIT.value:
            raise ValueError("Received quantity and condition are recorded while the transfer is in transit")
        if not manages_destination:
            return forbidden("Only the destination warehouse manager can record receipt")
        if data.get("actual_quantity") is not None and data["actual_quantity"] > line.shipped_quantity:
            raise ValueError("Received quantity cannot exceed the shipped quantity")

    for key, value in data.items():
        setattr(line, key, value.value if hasattr(value, "value") else value)

    _log_update(db, transfer, current_user.user_id, TransferUpdateType.RECEIPT_INFO.value,
                f"Line {line.item.sku if line.item else line.item_id} updated",
                {k: (v.value if hasattr(v, "value") else v) for k, v in data.items()})
    db.commit()
    return get_transfer(db, transfer_id)


# ---------------- Dedicated actions ----------------

def reject_transfer(db: Session, transfer_id: UUID, reason: str, current_user: UserToken) -> TransferDetailOut:
    """Refuse a pending transfer, or send shipped goods back for return."""
    transfer = get_transfer_or_404(db, transfer_id)
    if transfer.status == TransferStatus.PENDING.value:
        target = TransferStatus.REJECTED
    elif transfer.status == TransferStatus.IN_TRANSIT.value:
        target = TransferStatus.RETURN_REQUESTED
    else:
        return error_response(
            message=f"A transfer in '{transfer.status}' cannot be rejected",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    change_status(db, transfer, target, current_user, reason=reason)
    db.commit()
    return get_transfer(db, transfer_id)


def run_action(db: Session, transfer_id: UUID, target: TransferStatus, current_user: UserToken,
               reason: Optional[str] = None, extra: Optional[dict] = None) -> TransferDetailOut:
    transfer = get_transfer_or_404(db, transfer_id)
    change_status(db, transfer, target, current_user, reason=reason, extra=extra)
    db.commit()
    return get_transfer(db, transfer_id)
