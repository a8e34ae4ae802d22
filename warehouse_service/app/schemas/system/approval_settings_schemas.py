from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.request_enum import ApprovalLevel


class ApprovalSettingsCreate(BaseModel):
    request_type: str = Field("issue", min_length=1)
    min_approval_level: ApprovalLevel = ApprovalLevel.MANAGER
    max_amount: Optional[Decimal] = Field(None, ge=0)
    requires_second_approval: bool = False
    is_active: bool = True


class ApprovalSettingsUpdate(BaseModel):
    request_type: Optional[str] = Field(None, min_length=1)
    min_approval_level: Optional[ApprovalLevel] = None
    max_amount: Optional[Decimal] = Field(None, ge=0)
    requires_second_approval: Optional[bool] = None
    is_active: Optional[bool] = None


class ApprovalSettingsOut(BaseModel):
    id: UUID
    request_type: str
    min_approval_level: str
    max_amount: Optional[Decimal] = None
    requires_second_approval: bool
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
