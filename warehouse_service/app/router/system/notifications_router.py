# app/router/system/notifications_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import validate_current_token
from ...schemas.system.notifications_schemas import (
    NotificationCreate, NotificationOut, UnreadCountOut)
from ...crud.system import notifications_crud as crud

router = APIRouter(prefix="/api/notifications", tags=["notifications"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[NotificationOut])
def read_notifications(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_notifications(db, current_user)


@router.get("/unread-count", response_model=UnreadCountOut)
def read_unread_count(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return UnreadCountOut(count=crud.get_unread_count(db, current_user))


@router.post("", response_model=NotificationOut)
def send_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.send_notification(db, payload, current_user)


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.mark_read(db, notification_id, current_user)


@router.patch("/{notification_id}/archive", response_model=NotificationOut)
def archive(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.archive(db, notification_id, current_user)
