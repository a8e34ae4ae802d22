from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.transfer_enum import ItemCondition, RejectedGoodsStatus, TransferMode, TransferStatus


class TransferItemIn(BaseModel):
    item_id: UUID
    requested_quantity: int = Field(..., gt=0)
    notes: Optional[str] = None


class TransferCreate(BaseModel):
    source_warehouse_id: UUID
    destination_warehouse_id: UUID
    transfer_mode: TransferMode = TransferMode.COURIER
    expected_shipment_date: Optional[datetime] = None
    expected_arrival_date: Optional[datetime] = None
    courier_name: Optional[str] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    items: List[TransferItemIn] = Field(..., min_length=1)


class TransferPatch(BaseModel):
    status: Optional[TransferStatus] = None
    notes: Optional[str] = None

    # source warehouse fields
    receipt_number: Optional[str] = None
    handover_person_name: Optional[str] = None
    handover_person_contact: Optional[str] = None
    handover_date: Optional[datetime] = None
    courier_name: Optional[str] = None
    tracking_number: Optional[str] = None
    transport_notes: Optional[str] = None

    # destination warehouse fields
    received_by: Optional[str] = None
    received_date: Optional[datetime] = None
    receiver_notes: Optional[str] = None
    overall_condition: Optional[ItemCondition] = None
    rejection_reason: Optional[str] = None
    return_reason: Optional[str] = None


SOURCE_FIELDS = (
    "receipt_number", "handover_person_name", "handover_person_contact",
    "handover_date", "courier_name", "tracking_number", "transport_notes",
)
DESTINATION_FIELDS = (
    "received_by", "received_date", "receiver_notes", "overall_condition",
    "rejection_reason", "return_reason",
)


class TransferItemPatch(BaseModel):
    approved_quantity: Optional[int] = Field(None, ge=0)
    actual_quantity: Optional[int] = Field(None, ge=0)
    condition: Optional[ItemCondition] = None
    notes: Optional[str] = None


class TransferRejectIn(BaseModel):
    reason: str = Field(..., min_length=1)


class ReturnApproveIn(BaseModel):
    reason: Optional[str] = None


class DisposalApproveIn(BaseModel):
    reason: str = Field(..., min_length=1)


class ReturnShipmentIn(BaseModel):
    courier_name: str
    tracking_number: Optional[str] = None
    shipped_date: Optional[datetime] = None


class ReturnDeliveryIn(BaseModel):
    delivered_date: Optional[datetime] = None
    notes: Optional[str] = None


class TransferItemOut(BaseModel):
    id: UUID
    item_id: UUID
    item_name: Optional[str] = None
    sku: Optional[str] = None
    requested_quantity: int
    approved_quantity: Optional[int] = None
    actual_quantity: Optional[int] = None
    condition: Optional[str] = None
    notes: Optional[str] = None


class TransferUpdateOut(BaseModel):
    id: UUID
    updated_by: UUID
    status: str
    update_type: str
    description: Optional[str] = None
    details: Optional[dict] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TransferOut(BaseModel):
    id: UUID
    transfer_code: str
    source_warehouse_id: UUID
    source_warehouse_name: Optional[str] = None
    destination_warehouse_id: Optional[UUID] = None
    destination_warehouse_name: Optional[str] = None
    initiated_by: UUID
    initiated_by_name: Optional[str] = None
    approved_by: Optional[UUID] = None
    status: str
    transfer_mode: str
    expected_shipment_date: Optional[datetime] = None
    expected_arrival_date: Optional[datetime] = None
    actual_shipment_date: Optional[datetime] = None
    actual_arrival_date: Optional[datetime] = None
    courier_name: Optional[str] = None
    tracking_number: Optional[str] = None
    receipt_number: Optional[str] = None
    handover_person_name: Optional[str] = None
    handover_person_contact: Optional[str] = None
    handover_date: Optional[datetime] = None
    transport_notes: Optional[str] = None
    received_by: Optional[str] = None
    received_date: Optional[datetime] = None
    receiver_notes: Optional[str] = None
    overall_condition: Optional[str] = None
    rejection_reason: Optional[str] = None
    rejected_by: Optional[UUID] = None
    rejected_date: Optional[datetime] = None
    return_reason: Optional[str] = None
    return_courier_name: Optional[str] = None
    return_tracking_number: Optional[str] = None
    return_shipped_date: Optional[datetime] = None
    return_delivered_date: Optional[datetime] = None
    disposal_reason: Optional[str] = None
    disposal_date: Optional[datetime] = None
    notes: Optional[str] = None
    item_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TransferDetailOut(TransferOut):
    items: List[TransferItemOut] = []
    updates: List[TransferUpdateOut] = []
    next_statuses: List[str] = []


class RejectedGoodsOut(BaseModel):
    id: UUID
    transfer_id: UUID
    transfer_code: Optional[str] = None
    item_id: UUID
    item_name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    rejection_reason: str
    rejected_by: UUID
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    status: str
    notes: Optional[str] = None
    rejected_at: Optional[datetime] = None


class RejectedGoodsUpdate(BaseModel):
    status: Optional[RejectedGoodsStatus] = None
    notes: Optional[str] = None
