# app/crud/requests/transfer_notifications_crud.py
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from shared.helpers.json_response_helper import not_found
from ...enum.request_enum import TransferNotificationStatus
from ...models.requests.transfer_notifications import TransferNotification
from ...schemas.requests.requests_schemas import TransferNotificationOut, TransferNotificationUpdate


def to_notification_out(row: TransferNotification) -> TransferNotificationOut:
    return TransferNotificationOut(
        id=row.id,
        request_id=row.request_id,
        warehouse_id=row.warehouse_id,
        warehouse_name=row.warehouse.name if row.warehouse else None,
        item_id=row.item_id,
        item_name=row.item.name if row.item else None,
        required_quantity=row.required_quantity,
        available_quantity=row.available_quantity,
        status=row.status,
        notified_user_id=row.notified_user_id,
        transfer_id=row.transfer_id,
        notes=row.notes,
        created_at=row.created_at,
        resolved_at=row.resolved_at,
    )


def _query(db: Session):
    return db.query(TransferNotification).options(
        joinedload(TransferNotification.warehouse),
        joinedload(TransferNotification.item),
    )


def get_pending_notifications(db: Session) -> List[TransferNotificationOut]:
    rows = (
        _query(db)
        .filter(TransferNotification.status == TransferNotificationStatus.PENDING.value)
        .order_by(TransferNotification.created_at.desc())
        .all()
    )
    return [to_notification_out(r) for r in rows]


def get_notifications_by_warehouse(db: Session, warehouse_id: UUID) -> List[TransferNotificationOut]:
    rows = (
        _query(db)
        .filter(TransferNotification.warehouse_id == warehouse_id)
        .order_by(TransferNotification.created_at.desc())
        .all()
    )
    return [to_notification_out(r) for r in rows]


def update_notification(db: Session, notification_id: UUID,
                        payload: TransferNotificationUpdate) -> Optional[TransferNotificationOut]:
    row = _query(db).filter(TransferNotification.id == notification_id).first()
    if not row:
        return not_found("Transfer notification")

    data = payload.model_dump(exclude_unset=True)
    if data.get("status") is not None:
        row.status = data["status"].value
        if row.status != TransferNotificationStatus.PENDING.value and row.resolved_at is None:
            row.resolved_at = datetime.now(timezone.utc)
    if "notes" in data:
        row.notes = data["notes"]
    if "transfer_id" in data:
        row.transfer_id = data["transfer_id"]

    db.commit()
    db.refresh(row)
    return to_notification_out(row)
