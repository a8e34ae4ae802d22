from datetime import date
from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class AnalyticsParams(BaseModel):
    start_date: date
    end_date: date
    warehouse_id: Optional[UUID] = None
    department_id: Optional[UUID] = None


class FastMovingRow(BaseModel):
    item_id: UUID
    item_name: str
    sku: str
    unit: str
    movement_count: int
    total_quantity: int
    turnover_rate: int


class MostOrderedRow(BaseModel):
    item_id: UUID
    item_name: str
    sku: str
    unit: str
    order_count: int
    total_quantity: int


class DepartmentConsumptionRow(BaseModel):
    department_id: UUID
    department_name: str
    request_count: int
    total_value: float
    avg_value: float


class UserRequestsRow(BaseModel):
    user_id: UUID
    user_name: str
    department_name: Optional[str] = None
    request_count: int
    approved_count: int
    rejected_count: int
    pending_count: int
    approval_rate: int


class PriceVariationRow(BaseModel):
    item_id: UUID
    item_name: str
    sku: str
    purchase_count: int
    start_price: float
    end_price: float
    min_price: float
    max_price: float
    avg_price: float
    price_change: float
    variation_percent: int
