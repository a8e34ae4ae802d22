# app/router/requests/transfer_notifications_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.requests.requests_schemas import TransferNotificationOut, TransferNotificationUpdate
from ...crud.requests import transfer_notifications_crud as crud

router = APIRouter(prefix="/api/transfer-notifications", tags=["transfer notifications"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[TransferNotificationOut])
def read_pending_notifications(db: Session = Depends(get_db)):
    return crud.get_pending_notifications(db)


@router.get("/warehouse/{warehouse_id}", response_model=List[TransferNotificationOut])
def read_notifications_by_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_notifications_by_warehouse(db, warehouse_id)


@router.patch("/{notification_id}", response_model=TransferNotificationOut)
def update_notification(
    notification_id: UUID,
    payload: TransferNotificationUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_notification(db, notification_id, payload)
