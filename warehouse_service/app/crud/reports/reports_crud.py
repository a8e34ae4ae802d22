# app/crud/reports/reports_crud.py
import logging
from datetime import date, datetime, time, timezone
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from dateutil.relativedelta import relativedelta

from ...enum.inventory_enum import LowStockStatus, TransactionStatus, TransactionType
from ...helpers.valuation_helper import compute_unit_values, replay_quantity
from ...models.masters.categories import Category
from ...models.masters.items import Item
from ...models.masters.warehouses import Warehouse
from ...models.requests.requests import Request
from ...models.stock.inventory import Inventory
from ...models.stock.transactions import Transaction
from ...schemas.reports.reports_schemas import (
    DashboardSummary, LowStockParams, LowStockRow, MovementReportParams,
    StockReportRow, ValuationReport, ValuationRow)
from ...schemas.stock.transactions_schemas import TransactionOut
from ..requests.requests_crud import OPEN_STATUSES, _request_query, to_request_out
from ..stock.transactions_crud import to_transaction_out, transaction_query
from ..system.organization_settings_crud import get_or_create_settings

logger = logging.getLogger(__name__)


def _stock_rows(db: Session):
    return (
        db.query(Inventory, Item, Warehouse, Category)
        .join(Item, Item.id == Inventory.item_id)
        .join(Warehouse, Warehouse.id == Inventory.warehouse_id)
        .outerjoin(Category, Category.id == Item.category_id)
        .filter(Item.is_deleted == False)
    )


def _to_stock_row(inv, item, warehouse, category) -> StockReportRow:
    return StockReportRow(
        id=inv.id,
        item_id=item.id,
        item_name=item.name,
        sku=item.sku,
        unit=item.unit,
        category_name=category.name if category else None,
        warehouse_id=warehouse.id,
        warehouse_name=warehouse.name,
        quantity=inv.quantity,
        min_stock_level=item.min_stock_level,
        is_low_stock=inv.quantity < item.min_stock_level,
        last_updated=inv.last_updated,
    )


# ---------------- Stock ----------------

def get_stock_report(db: Session) -> List[StockReportRow]:
    rows = _stock_rows(db).order_by(Warehouse.name.asc(), Item.name.asc()).all()
    return [_to_stock_row(*row) for row in rows]


# ---------------- Movement ----------------

def get_movement_report(db: Session, params: MovementReportParams) -> List[TransactionOut]:
    query = transaction_query(db)

    if params.start_date:
        query = query.filter(Transaction.created_at >= datetime.combine(params.start_date, time.min))
    if params.end_date:
        # inclusive of the whole end day
        query = query.filter(Transaction.created_at <= datetime.combine(params.end_date, time.max))
    if params.warehouse_id:
        query = query.filter(
            (Transaction.source_warehouse_id == params.warehouse_id)
            | (Transaction.destination_warehouse_id == params.warehouse_id)
        )
    if params.transaction_type:
        query = query.filter(Transaction.transaction_type == params.transaction_type.value)

    return [to_transaction_out(t) for t in query.order_by(Transaction.created_at.desc()).all()]


# ---------------- Low stock ----------------

def classify_low_stock(quantity: int, min_level: int) -> str:
    percentage = (quantity / min_level * 100) if min_level else 0
    if quantity <= 0 or percentage <= 25:
        return LowStockStatus.CRITICAL.value
    if percentage <= 50:
        return LowStockStatus.LOW.value
    return LowStockStatus.WARNING.value


def get_low_stock_report(db: Session, params: LowStockParams) -> List[LowStockRow]:
    query = _stock_rows(db).filter(Inventory.quantity < Item.min_stock_level)

    if params.warehouse_id:
        query = query.filter(Inventory.warehouse_id == params.warehouse_id)
    if params.item_id:
        query = query.filter(Inventory.item_id == params.item_id)
    if params.category_id:
        query = query.filter(Item.category_id == params.category_id)

    last_restock = _last_restock_dates(db)

    result = []
    for inv, item, warehouse, category in query.all():
        status = classify_low_stock(inv.quantity, item.min_stock_level)
        if params.status and status != params.status.value:
            continue
        percentage = round(inv.quantity / item.min_stock_level * 100, 2) if item.min_stock_level else 0.0
        result.append(LowStockRow(
            item_id=item.id,
            item_name=item.name,
            sku=item.sku,
            unit=item.unit,
            category_name=category.name if category else None,
            warehouse_id=warehouse.id,
            warehouse_name=warehouse.name,
            current_stock=inv.quantity,
            min_stock_level=item.min_stock_level,
            stock_difference=item.min_stock_level - inv.quantity,
            stock_percentage=percentage,
            status=status,
            last_restock_date=last_restock.get((item.id, warehouse.id)),
        ))

    # most critical first
    result.sort(key=lambda row: (row.stock_percentage, -row.stock_difference))
    return result


def _last_restock_dates(db: Session):
    rows = (
        db.query(
            Transaction.item_id,
            Transaction.destination_warehouse_id,
            func.max(Transaction.created_at),
        )
        .filter(Transaction.transaction_type == TransactionType.CHECK_IN.value)
        .group_by(Transaction.item_id, Transaction.destination_warehouse_id)
        .all()
    )
    return {(item_id, warehouse_id): last for item_id, warehouse_id, last in rows}


# ---------------- Valuation ----------------

def get_inventory_valuation(db: Session, as_of_date: Optional[date] = None) -> ValuationReport:
    as_of_date = as_of_date or datetime.now(timezone.utc).date()
    # include everything recorded on the as-of day
    as_of = datetime.combine(as_of_date, time.max)

    settings = get_or_create_settings(db)
    method = settings.inventory_valuation_method

    ledger = (
        db.query(Transaction)
        .filter(Transaction.created_at <= as_of)
        .order_by(Transaction.created_at.asc())
        .all()
    )
    unit_values = compute_unit_values(ledger, method, as_of)

    by_item = {}
    for txn in ledger:
        by_item.setdefault(txn.item_id, []).append(txn)

    rows = []
    for inv, item, warehouse, category in _stock_rows(db).order_by(Item.name.asc(), Warehouse.name.asc()).all():
        if item.id not in unit_values:
            continue
        quantity = replay_quantity(by_item.get(item.id, []), item.id, warehouse.id, as_of)
        if quantity <= 0:
            continue
        unit_value = unit_values[item.id]
        rows.append(ValuationRow(
            item_id=item.id,
            item_name=item.name,
            sku=item.sku,
            category_name=category.name if category else None,
            warehouse_id=warehouse.id,
            warehouse_name=warehouse.name,
            current_stock=quantity,
            unit=item.unit,
            unit_value=round(unit_value, 2),
            total_value=round(unit_value * quantity, 2),
            valuation_method=method,
        ))

    return ValuationReport(
        as_of_date=as_of_date,
        valuation_method=method,
        currency=settings.currency,
        currency_symbol=settings.currency_symbol,
        items=rows,
        total_value=round(sum(r.total_value for r in rows), 2),
    )


# ---------------- Dashboard ----------------

def percent_change(current: int, previous: int) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 1)


def get_dashboard_summary(db: Session) -> DashboardSummary:
    today = datetime.now(timezone.utc).date()
    month_start = datetime.combine(today.replace(day=1), time.min)
    last_month_start = month_start - relativedelta(months=1)

    total_items = db.query(func.count(Item.id)).filter(Item.is_deleted == False).scalar() or 0
    items_last_month = db.query(func.count(Item.id)).filter(
        Item.is_deleted == False, Item.created_at < month_start).scalar() or 0

    low_stock = (
        _stock_rows(db)
        .filter(Inventory.quantity < Item.min_stock_level)
        .order_by(Inventory.quantity.asc())
        .all()
    )
    transfers_last_month = db.query(func.count(Transaction.id)).filter(
        Transaction.transaction_type == TransactionType.TRANSFER.value,
        Transaction.created_at >= last_month_start,
        Transaction.created_at < month_start,
    ).scalar() or 0

    pending_count = db.query(func.count(Request.id)).filter(
        Request.status.in_(OPEN_STATUSES)).scalar() or 0
    pending_last_month = db.query(func.count(Request.id)).filter(
        Request.status.in_(OPEN_STATUSES),
        Request.created_at >= last_month_start,
        Request.created_at < month_start,
    ).scalar() or 0

    active_transfers = db.query(func.count(Transaction.id)).filter(
        Transaction.transaction_type == TransactionType.TRANSFER.value,
        Transaction.status == TransactionStatus.IN_TRANSIT.value,
    ).scalar() or 0
    active_last_month = db.query(func.count(Transaction.id)).filter(
        Transaction.transaction_type == TransactionType.TRANSFER.value,
        Transaction.status == TransactionStatus.IN_TRANSIT.value,
        Transaction.created_at >= last_month_start,
        Transaction.created_at < month_start,
    ).scalar() or 0

    recent = transaction_query(db).order_by(Transaction.created_at.desc()).limit(5).all()
    pending = (
        _request_query(db)
        .filter(Request.status.in_(OPEN_STATUSES))
        .order_by(Request.created_at.desc())
        .limit(3)
        .all()
    )

    return DashboardSummary(
        total_items=total_items,
        low_stock_items_count=len(low_stock),
        pending_requests_count=pending_count,
        active_transfers_count=active_transfers,
        total_items_change=percent_change(total_items, items_last_month),
        low_stock_change=percent_change(len(low_stock), transfers_last_month),
        pending_requests_change=percent_change(pending_count, pending_last_month),
        active_transfers_change=percent_change(active_transfers, active_last_month),
        recent_transactions=[to_transaction_out(t) for t in recent],
        low_stock_items=[_to_stock_row(*row) for row in low_stock[:5]],
        pending_requests=[to_request_out(r) for r in pending],
    )


# ---------------- Exports ----------------

TRANSACTION_EXPORT_COLUMNS = {
    "transaction_code": "Transaction Code",
    "transaction_type": "Type",
    "item_name": "Item",
    "sku": "SKU",
    "quantity": "Quantity",
    "source_warehouse_name": "Source Warehouse",
    "destination_warehouse_name": "Destination Warehouse",
    "status": "Status",
    "cost": "Cost",
    "user_name": "Recorded By",
    "created_at": "Created At",
}

STOCK_EXPORT_COLUMNS = {
    "item_name": "Item",
    "sku": "SKU",
    "category_name": "Category",
    "warehouse_name": "Warehouse",
    "quantity": "Quantity",
    "unit": "Unit",
    "min_stock_level": "Min Stock Level",
    "is_low_stock": "Low Stock",
}


def get_transactions_export_rows(db: Session) -> List[dict]:
    rows = transaction_query(db).order_by(Transaction.created_at.desc()).all()
    return [to_transaction_out(t).model_dump() for t in rows]


def get_stock_export_rows(db: Session) -> List[dict]:
    return [row.model_dump() for row in get_stock_report(db)]
