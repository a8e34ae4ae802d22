from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.inventory_enum import TransactionStatus, TransactionType


class TransactionCreate(BaseModel):
    transaction_type: TransactionType
    item_id: UUID
    quantity: int = Field(..., gt=0)
    source_warehouse_id: Optional[UUID] = None
    destination_warehouse_id: Optional[UUID] = None
    request_id: Optional[UUID] = None
    requester_id: Optional[UUID] = None
    status: Optional[TransactionStatus] = None
    cost: Optional[float] = Field(None, ge=0)
    supplier_name: Optional[str] = None
    po_number: Optional[str] = None
    delivery_challan_number: Optional[str] = None
    check_in_date: Optional[date] = None


class TransactionStatusUpdate(BaseModel):
    status: TransactionStatus


class TransactionOut(BaseModel):
    id: UUID
    transaction_code: str
    transaction_type: str
    item_id: UUID
    item_name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    source_warehouse_id: Optional[UUID] = None
    source_warehouse_name: Optional[str] = None
    destination_warehouse_id: Optional[UUID] = None
    destination_warehouse_name: Optional[str] = None
    request_id: Optional[UUID] = None
    transfer_id: Optional[UUID] = None
    user_id: UUID
    user_name: Optional[str] = None
    requester_id: Optional[UUID] = None
    status: str
    cost: Optional[float] = None
    supplier_name: Optional[str] = None
    po_number: Optional[str] = None
    delivery_challan_number: Optional[str] = None
    check_in_date: Optional[date] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
