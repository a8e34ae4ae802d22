from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class WarehouseBase(BaseModel):
    name: str = Field(..., min_length=1)
    location: str
    capacity: int = Field(0, ge=0)
    manager_id: Optional[UUID] = None


class WarehouseCreate(WarehouseBase):
    pass


class WarehouseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    manager_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class WarehouseManagerUpdate(BaseModel):
    manager_id: UUID


class ManagerSummary(BaseModel):
    id: UUID
    name: str
    role: str

    model_config = {"from_attributes": True}


class WarehouseOut(WarehouseBase):
    id: UUID
    is_active: bool
    status: str
    manager: Optional[ManagerSummary] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class WarehouseStatsOut(BaseModel):
    id: UUID
    name: str
    location: str
    capacity: int
    manager_name: Optional[str] = None
    total_items: int
    low_stock_items: int
    capacity_used: float
    is_active: bool
    status: str
