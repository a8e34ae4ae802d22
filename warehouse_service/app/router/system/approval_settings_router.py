# app/router/system/approval_settings_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, validate_current_token
from ...schemas.system.approval_settings_schemas import (
    ApprovalSettingsCreate, ApprovalSettingsOut, ApprovalSettingsUpdate)
from ...crud.system import approval_settings_crud as crud

router = APIRouter(prefix="/api/approval-settings", tags=["approval settings"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[ApprovalSettingsOut])
def read_approval_settings(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.get_approval_settings(db)


@router.post("", response_model=ApprovalSettingsOut)
def create_approval_setting(
    payload: ApprovalSettingsCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.create_approval_setting(db, payload)


@router.put("/{setting_id}", response_model=ApprovalSettingsOut)
def update_approval_setting(
    setting_id: UUID,
    payload: ApprovalSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_approval_setting(db, setting_id, payload)


@router.delete("/{setting_id}", response_model=ApprovalSettingsOut)
def delete_approval_setting(
    setting_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.delete_approval_setting(db, setting_id)
