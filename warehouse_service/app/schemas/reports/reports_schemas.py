from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel

from ...enum.inventory_enum import LowStockStatus, TransactionType
from ..requests.requests_schemas import RequestOut
from ..stock.transactions_schemas import TransactionOut


class StockReportRow(BaseModel):
    id: UUID
    item_id: UUID
    item_name: str
    sku: str
    unit: str
    category_name: Optional[str] = None
    warehouse_id: UUID
    warehouse_name: str
    quantity: int
    min_stock_level: int
    is_low_stock: bool
    last_updated: Optional[datetime] = None


class MovementReportParams(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    warehouse_id: Optional[UUID] = None
    transaction_type: Optional[TransactionType] = None


class LowStockParams(BaseModel):
    warehouse_id: Optional[UUID] = None
    item_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    status: Optional[LowStockStatus] = None


class LowStockRow(BaseModel):
    item_id: UUID
    item_name: str
    sku: str
    unit: str
    category_name: Optional[str] = None
    warehouse_id: UUID
    warehouse_name: str
    current_stock: int
    min_stock_level: int
    stock_difference: int
    stock_percentage: float
    status: str
    last_restock_date: Optional[datetime] = None


class ValuationRow(BaseModel):
    item_id: UUID
    item_name: str
    sku: str
    category_name: Optional[str] = None
    warehouse_id: UUID
    warehouse_name: str
    current_stock: int
    unit: str
    unit_value: float
    total_value: float
    valuation_method: str


class ValuationReport(BaseModel):
    as_of_date: date
    valuation_method: str
    currency: str
    currency_symbol: str
    items: List[ValuationRow]
    total_value: float


class DashboardSummary(BaseModel):
    total_items: int
    low_stock_items_count: int
    pending_requests_count: int
    active_transfers_count: int
    total_items_change: float
    low_stock_change: float
    pending_requests_change: float
    active_transfers_change: float
    recent_transactions: List[TransactionOut]
    low_stock_items: List[StockReportRow]
    pending_requests: List[RequestOut]
