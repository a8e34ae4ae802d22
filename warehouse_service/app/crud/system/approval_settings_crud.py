# app/crud/system/approval_settings_crud.py
import logging
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import not_found
from ...models.system.approval_settings import ApprovalSettings
from ...schemas.system.approval_settings_schemas import (
    ApprovalSettingsCreate, ApprovalSettingsOut, ApprovalSettingsUpdate)

logger = logging.getLogger(__name__)


def get_approval_settings(db: Session) -> List[ApprovalSettings]:
    return db.query(ApprovalSettings).order_by(ApprovalSettings.created_at.desc()).all()


def get_approval_setting_or_404(db: Session, setting_id: UUID) -> ApprovalSettings:
    setting = db.query(ApprovalSettings).filter(ApprovalSettings.id == setting_id).first()
    if not setting:
        return not_found("Approval setting")
    return setting


def create_approval_setting(db: Session, payload: ApprovalSettingsCreate) -> ApprovalSettings:
    data = payload.model_dump()
    data["min_approval_level"] = payload.min_approval_level.value

    setting = ApprovalSettings(**data)
    db.add(setting)
    db.commit()
    db.refresh(setting)
    logger.info("Approval setting %s created for %s", setting.id, setting.request_type)
    return setting


def update_approval_setting(db: Session, setting_id: UUID,
                            payload: ApprovalSettingsUpdate) -> ApprovalSettings:
    setting = get_approval_setting_or_404(db, setting_id)

    data = payload.model_dump(exclude_unset=True)
    if data.get("min_approval_level") is not None:
        data["min_approval_level"] = payload.min_approval_level.value

    for key, value in data.items():
        setattr(setting, key, value)

    db.commit()
    db.refresh(setting)
    return setting


def delete_approval_setting(db: Session, setting_id: UUID) -> ApprovalSettingsOut:
    setting = get_approval_setting_or_404(db, setting_id)
    out = ApprovalSettingsOut.model_validate(setting)
    db.delete(setting)
    db.commit()
    return out
