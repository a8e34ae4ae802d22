# app/crud/reports/analytics_crud.py
"""Usage analytics over a required date window.

Every report takes the same ``AnalyticsParams``: an inclusive
``start_date``/``end_date`` pair plus optional warehouse and department
filters. Department always means the department of the user behind the
row (the recorder of a transaction, the requester of a request).
"""
import logging
from collections import defaultdict
from datetime import datetime, time
from decimal import Decimal
from typing import List, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.models.users import Users
from ...enum.inventory_enum import TransactionStatus, TransactionType
from ...enum.request_enum import RequestStatus
from ...helpers.valuation_helper import compute_unit_values, to_naive_utc
from ...models.masters.departments import Department
from ...models.masters.items import Item
from ...models.requests.requests import Request, RequestItem
from ...models.stock.transactions import Transaction
from ...schemas.reports.analytics_schemas import (
    AnalyticsParams, DepartmentConsumptionRow, FastMovingRow, MostOrderedRow,
    PriceVariationRow, UserRequestsRow)
from ..system.organization_settings_crud import get_or_create_settings

logger = logging.getLogger(__name__)

FULFILLED_STATUSES = (RequestStatus.APPROVED.value, RequestStatus.COMPLETED.value)


def _window(params: AnalyticsParams) -> Tuple[datetime, datetime]:
    if params.start_date > params.end_date:
        raise ValueError("start_date must not be after end_date")
    return (datetime.combine(params.start_date, time.min),
            datetime.combine(params.end_date, time.max))


def _department_names(db: Session) -> dict:
    return {d.id: d.name for d in db.query(Department).all()}


def _filter_requests(query, params: AnalyticsParams, start: datetime, end: datetime):
    query = query.filter(Request.created_at >= start, Request.created_at <= end)
    if params.warehouse_id:
        query = query.filter(Request.warehouse_id == params.warehouse_id)
    if params.department_id:
        query = query.filter(Users.department_id == params.department_id)
    return query


# ---------------- Fastest moving ----------------

def get_fastest_moving_items(db: Session, params: AnalyticsParams) -> List[FastMovingRow]:
    start, end = _window(params)

    query = (
        db.query(Item, func.count(Transaction.id), func.coalesce(func.sum(Transaction.quantity), 0))
        .join(Transaction, Transaction.item_id == Item.id)
        .filter(
            Transaction.created_at >= start,
            Transaction.created_at <= end,
            Transaction.status != TransactionStatus.CANCELLED.value,
        )
    )
    if params.warehouse_id:
        query = query.filter(
            (Transaction.source_warehouse_id == params.warehouse_id)
            | (Transaction.destination_warehouse_id == params.warehouse_id)
        )
    if params.department_id:
        query = query.join(Users, Users.id == Transaction.user_id).filter(
            Users.department_id == params.department_id)

    rows = []
    for item, count, quantity in query.group_by(Item.id).all():
        quantity = int(quantity or 0)
        rows.append(FastMovingRow(
            item_id=item.id,
            item_name=item.name,
            sku=item.sku,
            unit=item.unit,
            movement_count=count,
            total_quantity=quantity,
            turnover_rate=round(count / quantity * 100) if quantity else 0,
        ))

    rows.sort(key=lambda r: (-r.movement_count, r.item_name))
    return rows


# ---------------- Most ordered ----------------

def get_most_ordered_items(db: Session, params: AnalyticsParams) -> List[MostOrderedRow]:
    start, end = _window(params)

    query = (
        db.query(Item, func.count(func.distinct(Request.id)), func.coalesce(func.sum(RequestItem.quantity), 0))
        .join(RequestItem, RequestItem.item_id == Item.id)
        .join(Request, Request.id == RequestItem.request_id)
        .join(Users, Users.id == Request.user_id)
        .filter(Request.status.in_(FULFILLED_STATUSES))
    )
    query = _filter_requests(query, params, start, end)

    rows = [
        MostOrderedRow(
            item_id=item.id,
            item_name=item.name,
            sku=item.sku,
            unit=item.unit,
            order_count=count,
            total_quantity=int(quantity or 0),
        )
        for item, count, quantity in query.group_by(Item.id).all()
    ]
    rows.sort(key=lambda r: (-r.order_count, -r.total_quantity, r.item_name))
    return rows


# ---------------- Department consumption ----------------

def get_department_consumption(db: Session, params: AnalyticsParams) -> List[DepartmentConsumptionRow]:
    """Fulfilled request lines per requester department, valued at the window end."""
    start, end = _window(params)

    query = (
        db.query(Request.id, Users.department_id, RequestItem.item_id, RequestItem.quantity)
        .join(Users, Users.id == Request.user_id)
        .join(RequestItem, RequestItem.request_id == Request.id)
        .filter(Request.status.in_(FULFILLED_STATUSES), Users.department_id.isnot(None))
    )
    lines = _filter_requests(query, params, start, end).all()
    if not lines:
        return []

    method = get_or_create_settings(db).inventory_valuation_method
    ledger = db.query(Transaction).filter(
        Transaction.transaction_type == TransactionType.CHECK_IN.value,
        Transaction.created_at <= end,
    ).all()
    unit_values = compute_unit_values(ledger, method, end)

    requests_by_department = defaultdict(set)
    value_by_department = defaultdict(float)
    for request_id, department_id, item_id, quantity in lines:
        requests_by_department[department_id].add(request_id)
        # unvalued items count towards the request but add nothing
        value_by_department[department_id] += quantity * unit_values.get(item_id, 0.0)

    names = _department_names(db)
    rows = []
    for department_id, request_ids in requests_by_department.items():
        total = value_by_department[department_id]
        rows.append(DepartmentConsumptionRow(
            department_id=department_id,
            department_name=names.get(department_id, "Unknown"),
            request_count=len(request_ids),
            total_value=round(total, 2),
            avg_value=round(total / len(request_ids), 2),
        ))

    rows.sort(key=lambda r: (-r.total_value, r.department_name))
    return rows


# ---------------- User requests ----------------

def get_user_request_stats(db: Session, params: AnalyticsParams) -> List[UserRequestsRow]:
    start, end = _window(params)

    query = (
        db.query(Users, Request.status, func.count(Request.id))
        .join(Request, Request.user_id == Users.id)
    )
    query = _filter_requests(query, params, start, end)

    counts = defaultdict(lambda: defaultdict(int))
    users = {}
    for user, status, count in query.group_by(Users.id, Request.status).all():
        users[user.id] = user
        counts[user.id][status] += count

    names = _department_names(db)
    rows = []
    for user_id, by_status in counts.items():
        user = users[user_id]
        total = sum(by_status.values())
        approved = sum(by_status[s] for s in FULFILLED_STATUSES)
        rejected = by_status[RequestStatus.REJECTED.value]
        rows.append(UserRequestsRow(
            user_id=user_id,
            user_name=user.name,
            department_name=names.get(user.department_id),
            request_count=total,
            approved_count=approved,
            rejected_count=rejected,
            pending_count=total - approved - rejected,
            approval_rate=round(approved / total * 100) if total else 0,
        ))

    rows.sort(key=lambda r: (-r.request_count, r.user_name))
    return rows


# ---------------- Price variation ----------------

def get_price_variation(db: Session, params: AnalyticsParams) -> List[PriceVariationRow]:
    """
    Purchase price movement per item from costed check-ins.

    ``start_price`` is the last cost paid at or before the window start (the
    first one ever when the item was first bought inside the window) and
    ``end_price`` the last cost paid inside the window, falling back to the
    last one overall. Items bought fewer than twice are left out.
    """
    start, end = _window(params)

    query = db.query(Transaction).filter(
        Transaction.transaction_type == TransactionType.CHECK_IN.value,
        Transaction.status != TransactionStatus.CANCELLED.value,
        Transaction.cost > 0,
        Transaction.created_at <= end,
    )
    if params.warehouse_id:
        query = query.filter(Transaction.destination_warehouse_id == params.warehouse_id)
    if params.department_id:
        query = query.join(Users, Users.id == Transaction.user_id).filter(
            Users.department_id == params.department_id)

    by_item = defaultdict(list)
    for txn in query.order_by(Transaction.created_at.asc()).all():
        by_item[txn.item_id].append((to_naive_utc(txn.created_at), Decimal(str(txn.cost))))

    by_item = {item_id: rows for item_id, rows in by_item.items() if len(rows) >= 2}
    if not by_item:
        return []

    items = {i.id: i for i in db.query(Item).filter(Item.id.in_(list(by_item))).all()}

    rows = []
    for item_id, purchases in by_item.items():
        prices = [cost for _, cost in purchases]
        before = [cost for at, cost in purchases if at <= start]
        within = [cost for at, cost in purchases if start < at <= end]

        start_price = before[-1] if before else prices[0]
        end_price = within[-1] if within else prices[-1]
        min_price, max_price = min(prices), max(prices)

        if start_price > 0:
            variation = round(float((max_price - min_price) / min_price * 100))
        else:
            variation = 0

        item = items[item_id]
        rows.append(PriceVariationRow(
            item_id=item_id,
            item_name=item.name,
            sku=item.sku,
            purchase_count=len(prices),
            start_price=round(float(start_price), 2),
            end_price=round(float(end_price), 2),
            min_price=round(float(min_price), 2),
            max_price=round(float(max_price), 2),
            avg_price=round(float(sum(prices) / len(prices)), 2),
            price_change=round(float(end_price - start_price), 2),
            variation_percent=variation,
        ))

    rows.sort(key=lambda r: (-r.variation_percent, r.item_name))
    logger.debug("Price variation computed for %d items", len(rows))
    return rows
