from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.request_enum import RequestPriority, RequestStatus, TransferNotificationStatus


class RequestItemIn(BaseModel):
    item_id: UUID
    quantity: int = Field(..., gt=0)


class RequestCreate(BaseModel):
    warehouse_id: UUID
    priority: RequestPriority = RequestPriority.NORMAL
    justification: Optional[str] = None
    notes: Optional[str] = None
    items: List[RequestItemIn] = Field(..., min_length=1)


class RequestStatusUpdate(BaseModel):
    status: RequestStatus


class RequestItemOut(BaseModel):
    id: UUID
    item_id: UUID
    quantity: int
    item_name: Optional[str] = None
    sku: Optional[str] = None
    unit: Optional[str] = None


class RequestOut(BaseModel):
    id: UUID
    request_code: str
    user_id: UUID
    user_name: Optional[str] = None
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    status: str
    priority: str
    justification: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[RequestItemOut] = []


class RequestApprovalOut(BaseModel):
    id: UUID
    request_id: UUID
    request_code: Optional[str] = None
    approver_id: UUID
    approval_level: str
    status: str
    comments: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ApprovalDecision(BaseModel):
    comments: Optional[str] = None


class TransferNotificationOut(BaseModel):
    id: UUID
    request_id: UUID
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    item_id: UUID
    item_name: Optional[str] = None
    required_quantity: int
    available_quantity: int
    status: str
    notified_user_id: Optional[UUID] = None
    transfer_id: Optional[UUID] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


class TransferNotificationUpdate(BaseModel):
    status: Optional[TransferNotificationStatus] = None
    notes: Optional[str] = None
    transfer_id: Optional[UUID] = None
