# app/crud/system/organization_settings_crud.py
import logging
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from ...enum.inventory_enum import ValuationMethod
from ...models.system.organization_settings import OrganizationSettings
from ...schemas.system.organization_settings_schemas import OrganizationSettingsUpdate

logger = logging.getLogger(__name__)


def get_or_create_settings(db: Session) -> OrganizationSettings:
    """Singleton row; created with defaults on first read."""
    settings = db.query(OrganizationSettings).order_by(OrganizationSettings.created_at.asc()).first()
    if settings is None:
        settings = OrganizationSettings(
            inventory_valuation_method=ValuationMethod.LAST_VALUE.value)
        db.add(settings)
        db.commit()
        db.refresh(settings)
    return settings


def update_settings(db: Session, payload: OrganizationSettingsUpdate,
                    current_user: UserToken) -> OrganizationSettings:
    settings = get_or_create_settings(db)

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "inventory_valuation_method" in data:
        data["inventory_valuation_method"] = ValuationMethod(data["inventory_valuation_method"]).value

    for key, value in data.items():
        setattr(settings, key, value)
    settings.updated_by = current_user.user_id

    db.commit()
    db.refresh(settings)
    logger.info("Organization settings updated by %s: %s", current_user.user_id, sorted(data))
    return settings
