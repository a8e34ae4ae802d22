from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from ...enum.inventory_enum import ValuationMethod


class OrganizationSettingsUpdate(BaseModel):
    organization_name: Optional[str] = None
    currency: Optional[str] = None
    currency_symbol: Optional[str] = None
    timezone: Optional[str] = None
    inventory_valuation_method: Optional[ValuationMethod] = None


class OrganizationSettingsOut(BaseModel):
    id: UUID
    organization_name: str
    currency: str
    currency_symbol: str
    timezone: str
    inventory_valuation_method: str
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
