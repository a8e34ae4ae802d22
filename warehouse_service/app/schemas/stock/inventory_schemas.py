from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ..masters.items_schemas import ItemSummary


class InventoryUpsert(BaseModel):
    item_id: UUID
    warehouse_id: UUID
    quantity: int = Field(..., ge=0)


class InventoryQuantityUpdate(InventoryUpsert):
    pass


class InventoryOut(BaseModel):
    id: UUID
    item_id: UUID
    warehouse_id: UUID
    quantity: int
    last_updated: Optional[datetime] = None
    item: Optional[ItemSummary] = None
    warehouse_name: Optional[str] = None

    model_config = {"from_attributes": True}


class AvailableInventoryOut(BaseModel):
    id: UUID
    item_id: UUID
    quantity: int
    item: ItemSummary


class DisposeRequest(BaseModel):
    item_id: UUID
    warehouse_id: UUID
    quantity: int = Field(..., gt=0)
    reason: str = Field(..., min_length=1)
    notes: Optional[str] = None


class DisposeOut(BaseModel):
    transfer_id: UUID
    transfer_code: str
    transaction_code: str
    remaining_quantity: int


class DisposedInventoryParams(BaseModel):
    warehouse_id: Optional[UUID] = None
    item_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    approved_by: Optional[UUID] = None


class DisposedInventoryRow(BaseModel):
    transfer_id: UUID
    transfer_code: str
    item_id: UUID
    item_name: str
    sku: str
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    quantity: int
    unit_value: float
    total_value: float
    disposal_reason: Optional[str] = None
    disposal_date: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    approved_by_name: Optional[str] = None
