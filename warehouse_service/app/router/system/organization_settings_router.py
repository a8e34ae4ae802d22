# app/router/system/organization_settings_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, validate_current_token
from ...schemas.system.organization_settings_schemas import (
    OrganizationSettingsOut, OrganizationSettingsUpdate)
from ...crud.system import organization_settings_crud as crud

router = APIRouter(prefix="/api/organization-settings", tags=["organization settings"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=OrganizationSettingsOut)
def read_settings(db: Session = Depends(get_db)):
    return crud.get_or_create_settings(db)


@router.put("", response_model=OrganizationSettingsOut)
def update_settings(
    payload: OrganizationSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_settings(db, payload, current_user)
