# app/router/masters/items_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.masters.items_schemas import (
    CheckInHistoryOut, ItemCreate, ItemOut, ItemStatusUpdate, ItemUpdate)
from ...crud.masters import items_crud as crud

router = APIRouter(prefix="/api/items", tags=["items"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[ItemOut])
def read_items(db: Session = Depends(get_db)):
    return crud.get_items(db)


@router.get("/{item_id}", response_model=ItemOut)
def read_item(item_id: UUID, db: Session = Depends(get_db)):
    return crud.get_item(db, item_id)


@router.post("", response_model=ItemOut)
def create_item(
    payload: ItemCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.create_item(db, payload)


@router.put("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: UUID,
    payload: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_item(db, item_id, payload)


@router.delete("/{item_id}", response_model=ItemOut)
def delete_item(
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.delete_item(db, item_id)


@router.patch("/{item_id}/status", response_model=ItemOut)
def update_item_status(
    item_id: UUID,
    payload: ItemStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.set_item_status(db, item_id, payload.status)


@router.get("/{item_id}/checkin-history", response_model=List[CheckInHistoryOut])
def read_checkin_history(item_id: UUID, db: Session = Depends(get_db)):
    return crud.get_checkin_history(db, item_id)
