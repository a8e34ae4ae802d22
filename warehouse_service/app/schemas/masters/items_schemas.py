from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ...enum.inventory_enum import ItemStatus


class ItemBase(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    unit: str = "pcs"
    min_stock_level: int = Field(10, ge=0)
    category_id: Optional[UUID] = None


class ItemCreate(ItemBase):
    pass


class ItemUpdate(BaseModel):
    sku: Optional[str] = Field(None, min_length=1, max_length=64)
    name: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    min_stock_level: Optional[int] = Field(None, ge=0)
    category_id: Optional[UUID] = None


class ItemStatusUpdate(BaseModel):
    status: ItemStatus


class ItemOut(ItemBase):
    id: UUID
    status: str
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ItemSummary(BaseModel):
    id: UUID
    sku: str
    name: str
    unit: str
    min_stock_level: int

    model_config = {"from_attributes": True}


class CheckInHistoryOut(BaseModel):
    id: UUID
    transaction_code: str
    quantity: int
    cost: Optional[float] = None
    supplier_name: Optional[str] = None
    po_number: Optional[str] = None
    delivery_challan_number: Optional[str] = None
    check_in_date: Optional[date] = None
    warehouse_id: Optional[UUID] = None
    warehouse_name: Optional[str] = None
    user_name: Optional[str] = None
    created_at: datetime
