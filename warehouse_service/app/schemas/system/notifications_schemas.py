from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.sales_enum import NotificationPriority


class NotificationCreate(BaseModel):
    recipient_id: UUID
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    category: str = "general"
    priority: NotificationPriority = NotificationPriority.MEDIUM
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[UUID] = None


class NotificationOut(BaseModel):
    id: UUID
    sender_id: Optional[UUID] = None
    recipient_id: UUID
    subject: str
    message: str
    category: str
    priority: str
    status: str
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[UUID] = None
    is_archived: bool
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UnreadCountOut(BaseModel):
    count: int
