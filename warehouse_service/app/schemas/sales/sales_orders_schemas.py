from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from shared.core.schemas import CommonQueryParams
from ...enum.sales_enum import SalesOrderStatus


class SalesOrderItemIn(BaseModel):
    item_id: UUID
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    tax_percent: float = Field(0, ge=0, le=100)


class SalesOrderCreate(BaseModel):
    client_id: UUID
    warehouse_id: UUID
    currency: Optional[str] = None
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    items: List[SalesOrderItemIn] = []


class SalesOrderUpdate(BaseModel):
    client_id: Optional[UUID] = None
    warehouse_id: Optional[UUID] = None
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[SalesOrderItemIn]] = None


class SalesOrderRequest(CommonQueryParams):
    status: Optional[SalesOrderStatus] = None
    warehouse_id: Optional[UUID] = None


class SalesOrderDecision(BaseModel):
    comments: Optional[str] = None


class DispatchItemIn(BaseModel):
    sales_order_item_id: UUID
    quantity: int = Field(..., gt=0)


class DispatchCreate(BaseModel):
    courier_name: Optional[str] = None
    tracking_number: Optional[str] = None
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None
    driver_contact: Optional[str] = None
    notes: Optional[str] = None
    items: List[DispatchItemIn] = Field(..., min_length=1)


class SalesOrderItemOut(BaseModel):
    id: UUID
    item_id: UUID
    item_name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    unit_price: float
    tax_percent: float
    tax_amount: float
    line_total: float
    dispatched_quantity: int
    remaining_quantity: int


class SalesOrderApprovalOut(BaseModel):
    id: UUID
    approver_id: UUID
    status: str
    comments: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DispatchItemOut(BaseModel):
    id: UUID
    sales_order_item_id: UUID
    item_id: UUID
    item_name: Optional[str] = None
    quantity: int


class DispatchOut(BaseModel):
    id: UUID
    dispatch_code: str
    sales_order_id: UUID
    courier_name: Optional[str] = None
    tracking_number: Optional[str] = None
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None
    driver_contact: Optional[str] = None
    dispatch_date: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    status: str
    notes: Optional[str] = None
    items: List[DispatchItemOut] = []


class SalesOrderOut(BaseModel):
    id: UUID
    order_code: str
    client_id: UUID
    client_name: Optional[str] = None
    warehouse_id: UUID
    warehouse_name: Optional[str] = None
    order_date: Optional[datetime] = None
    status: str
    currency: str
    shipping_address: Optional[str] = None
    subtotal: float
    tax_amount: float
    total_amount: float
    notes: Optional[str] = None
    created_by: UUID
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class SalesOrderDetailOut(SalesOrderOut):
    items: List[SalesOrderItemOut] = []
    approvals: List[SalesOrderApprovalOut] = []
    dispatches: List[DispatchOut] = []
