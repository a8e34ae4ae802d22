# app/crud/sales/sales_orders_crud.py
import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole, UserStatus
from shared.utils.sales_order_pdf import generate_dispatch_challan_pdf, generate_sales_order_pdf
from ...enum.inventory_enum import TransactionType
from ...enum.request_enum import ApprovalStatus
from ...enum.sales_enum import DispatchStatus, NotificationPriority, SalesOrderStatus
from ...helpers.code_generator import next_code
from ...models.masters.items import Item
from ...models.sales.clients import Client
from ...models.sales.sales_orders import (
    SalesOrder, SalesOrderApproval, SalesOrderDispatch, SalesOrderDispatchItem, SalesOrderItem)
from ...schemas.sales.sales_orders_schemas import (
    DispatchCreate, DispatchItemOut, DispatchOut, SalesOrderApprovalOut, SalesOrderCreate,
    SalesOrderDetailOut, SalesOrderItemIn, SalesOrderItemOut, SalesOrderOut,
    SalesOrderRequest, SalesOrderUpdate)
from ..masters.warehouses_crud import get_warehouse_or_404
from ..stock.stock_ledger import adjust_inventory, available_quantity, insufficient_stock, record_transaction
from ..system.notifications_crud import notify
from ..system.organization_settings_crud import get_or_create_settings

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DISPATCHABLE = (SalesOrderStatus.APPROVED.value, SalesOrderStatus.PARTIAL_SHIPPED.value)


def _now():
    return datetime.now(timezone.utc)


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


# ---------------- Read ----------------

def _order_query(db: Session):
    return db.query(SalesOrder).options(
        joinedload(SalesOrder.client),
        joinedload(SalesOrder.warehouse),
        selectinload(SalesOrder.items).joinedload(SalesOrderItem.item),
        selectinload(SalesOrder.approvals),
        selectinload(SalesOrder.dispatches)
        .selectinload(SalesOrderDispatch.items)
        .joinedload(SalesOrderDispatchItem.item),
    )


def to_order_out(order: SalesOrder) -> SalesOrderOut:
    return SalesOrderOut(
        id=order.id,
        order_code=order.order_code,
        client_id=order.client_id,
        client_name=order.client.name if order.client else None,
        warehouse_id=order.warehouse_id,
        warehouse_name=order.warehouse.name if order.warehouse else None,
        order_date=order.order_date,
        status=order.status,
        currency=order.currency,
        shipping_address=order.shipping_address,
        subtotal=float(order.subtotal or 0),
        tax_amount=float(order.tax_amount or 0),
        total_amount=float(order.total_amount or 0),
        notes=order.notes,
        created_by=order.created_by,
        approved_by=order.approved_by,
        approved_at=order.approved_at,
        created_at=order.created_at,
    )


def _to_item_out(line: SalesOrderItem) -> SalesOrderItemOut:
    return SalesOrderItemOut(
        id=line.id,
        item_id=line.item_id,
        item_name=line.item.name if line.item else None,
        sku=line.item.sku if line.item else None,
        quantity=line.quantity,
        unit_price=float(line.unit_price),
        tax_percent=float(line.tax_percent or 0),
        tax_amount=float(line.tax_amount or 0),
        line_total=float(line.line_total or 0),
        dispatched_quantity=line.dispatched_quantity or 0,
        remaining_quantity=line.remaining_quantity,
    )


def to_dispatch_out(dispatch: SalesOrderDispatch) -> DispatchOut:
    return DispatchOut(
        id=dispatch.id,
        dispatch_code=dispatch.dispatch_code,
        sales_order_id=dispatch.sales_order_id,
        courier_name=dispatch.courier_name,
        tracking_number=dispatch.tracking_number,
        vehicle_number=dispatch.vehicle_number,
        driver_name=dispatch.driver_name,
        driver_contact=dispatch.driver_contact,
        dispatch_date=dispatch.dispatch_date,
        delivered_at=dispatch.delivered_at,
        status=dispatch.status,
        notes=dispatch.notes,
        items=[
            DispatchItemOut(
                id=line.id,
                sales_order_item_id=line.sales_order_item_id,
                item_id=line.item_id,
                item_name=line.item.name if line.item else None,
                quantity=line.quantity,
            )
            for line in dispatch.items
        ],
    )


def to_order_detail(order: SalesOrder) -> SalesOrderDetailOut:
    return SalesOrderDetailOut(
        **to_order_out(order).model_dump(),
        items=[_to_item_out(line) for line in order.items],
        approvals=[SalesOrderApprovalOut.model_validate(a) for a in order.approvals],
        dispatches=[to_dispatch_out(d) for d in order.dispatches],
    )


def get_sales_orders(db: Session, params: SalesOrderRequest) -> List[SalesOrderOut]:
    query = _order_query(db)

    if params.status:
        query = query.filter(SalesOrder.status == params.status.value)
    if params.warehouse_id:
        query = query.filter(SalesOrder.warehouse_id == params.warehouse_id)
    if params.search:
        search_term = f"%{params.search}%"
        query = query.join(Client, Client.id == SalesOrder.client_id).filter(
            or_(SalesOrder.order_code.ilike(search_term), Client.name.ilike(search_term)))

    query = query.order_by(SalesOrder.created_at.desc())
    if params.skip:
        query = query.offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)

    return [to_order_out(o) for o in query.all()]


def get_order_or_404(db: Session, order_id: UUID) -> SalesOrder:
    order = _order_query(db).filter(SalesOrder.id == order_id).first()
    if not order:
        return not_found("Sales order")
    return order


def get_sales_order(db: Session, order_id: UUID) -> SalesOrderDetailOut:
    return to_order_detail(get_order_or_404(db, order_id))


def next_order_code(db: Session) -> str:
    return next_code(db, SalesOrder.order_code, "SO")


def get_pending_order_approvals(db: Session, current_user: UserToken) -> List[SalesOrderOut]:
    query = _order_query(db).filter(SalesOrder.status == SalesOrderStatus.WAITING_APPROVAL.value)
    if not current_user.is_admin:
        query = query.join(SalesOrderApproval, SalesOrderApproval.sales_order_id == SalesOrder.id).filter(
            SalesOrderApproval.approver_id == current_user.user_id,
            SalesOrderApproval.status == ApprovalStatus.PENDING.value
        )
    return [to_order_out(o) for o in query.order_by(SalesOrder.created_at.asc()).all()]


# ---------------- Create / update ----------------

def _set_lines(db: Session, order: SalesOrder, lines: List[SalesOrderItemIn]):
    """Replace the order lines and recompute the totals."""
    item_ids = {line.item_id for line in lines}
    found = db.query(Item.id).filter(Item.id.in_(list(item_ids)), Item.is_deleted == False).count()
    if found != len(item_ids):
        return not_found("Item")

    order.items.clear()
    subtotal = tax_total = Decimal("0")

    for line in lines:
        unit_price = _money(line.unit_price)
        net = unit_price * line.quantity
        tax = _money(net * Decimal(str(line.tax_percent)) / 100)
        order.items.append(SalesOrderItem(
            item_id=line.item_id,
            quantity=line.quantity,
            unit_price=unit_price,
            tax_percent=Decimal(str(line.tax_percent)),
            tax_amount=tax,
            line_total=_money(net + tax),
            dispatched_quantity=0,
        ))
        subtotal += net
        tax_total += tax

    order.subtotal = _money(subtotal)
    order.tax_amount = _money(tax_total)
    order.total_amount = _money(subtotal + tax_total)


def _active_client(db: Session, client_id: UUID) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        return not_found("Client")
    if not client.is_active:
        return error_response(message="Client is inactive", status_code=AppStatusCode.INVALID_INPUT)
    return client


def create_sales_order(db: Session, payload: SalesOrderCreate, current_user: UserToken) -> SalesOrderDetailOut:
    client = _active_client(db, payload.client_id)
    warehouse = get_warehouse_or_404(db, payload.warehouse_id)

    order = SalesOrder(
        order_code=next_order_code(db),
        client_id=client.id,
        warehouse_id=warehouse.id,
        status=SalesOrderStatus.DRAFT.value,
        currency=payload.currency or get_or_create_settings(db).currency,
        shipping_address=payload.shipping_address or client.address,
        notes=payload.notes,
        created_by=current_user.user_id,
    )
    _set_lines(db, order, payload.items)
    db.add(order)
    db.commit()
    logger.info("Sales order %s drafted by %s", order.order_code, current_user.user_id)
    return get_sales_order(db, order.id)


def update_sales_order(db: Session, order_id: UUID, payload: SalesOrderUpdate,
                       current_user: UserToken) -> SalesOrderDetailOut:
    order = get_order_or_404(db, order_id)
    if order.status != SalesOrderStatus.DRAFT.value and not current_user.is_manager:
        return forbidden("Only draft orders can be edited")
    if order.dispatches and payload.items is not None:
        return error_response(
            message="Lines of a dispatched order cannot be replaced",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    data = payload.model_dump(exclude_unset=True, exclude={"items"})
    if data.get("client_id"):
        _active_client(db, data["client_id"])
    if data.get("warehouse_id"):
        get_warehouse_or_404(db, data["warehouse_id"])

    for key, value in data.items():
        setattr(order, key, value)
    if payload.items is not None:
        _set_lines(db, order, payload.items)

    db.commit()
    return get_sales_order(db, order.id)


def delete_sales_order(db: Session, order_id: UUID, current_user: UserToken) -> SalesOrderOut:
    order = get_order_or_404(db, order_id)
    if order.status != SalesOrderStatus.DRAFT.value and not current_user.is_admin:
        return forbidden("Only draft orders can be deleted")
    if order.dispatches:
        return error_response(
            message="Dispatched orders cannot be deleted",
            status_code=AppStatusCode.OPERATION_FAILED
        )

    out = to_order_out(order)
    db.delete(order)
    db.commit()
    return out


# ---------------- Approval ----------------

def _approver_for(db: Session, creator_id: UUID) -> Optional[Users]:
    """Creator's manager when it can approve, else the first manager or admin."""
    creator = db.query(Users).filter(Users.id == creator_id).first()
    approver_roles = (UserRole.ADMIN.value, UserRole.MANAGER.value)

    if creator and creator.manager_id:
        manager = db.query(Users).filter(
            Users.id == creator.manager_id,
            Users.role.in_(approver_roles),
            Users.is_deleted == False,
            Users.status == UserStatus.active.value
        ).first()
        if manager:
            return manager

    candidates = (
        db.query(Users)
        .filter(
            Users.role.in_(approver_roles),
            Users.is_deleted == False,
            Users.status == UserStatus.active.value
        )
        .order_by(Users.created_at.asc(), Users.username.asc())
        .all()
    )
    others = [u for u in candidates if u.id != creator_id]
    return (others or candidates or [None])[0]


def submit_sales_order(db: Session, order_id: UUID, current_user: UserToken) -> SalesOrderDetailOut:
    order = get_order_or_404(db, order_id)
    if order.status != SalesOrderStatus.DRAFT.value:
        return error_response(
            message=f"A {order.status} order cannot be submitted",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )
    if not order.items:
        return error_response(
            message="Add at least one item before submitting",
            status_code=AppStatusCode.REQUIRED_VALIDATION_ERROR
        )

    approver = _approver_for(db, order.created_by)
    if approver is None:
        return error_response(message="No approver is available", status_code=AppStatusCode.OPERATION_FAILED)

    order.status = SalesOrderStatus.WAITING_APPROVAL.value
    order.approvals.append(SalesOrderApproval(
        approver_id=approver.id,
        status=ApprovalStatus.PENDING.value,
    ))
    notify(
        db,
        recipient_id=approver.id,
        sender_id=current_user.user_id,
        subject=f"Sales order {order.order_code} awaits approval",
        message=f"Order {order.order_code} for {order.client.name} "
                f"totals {order.currency} {float(order.total_amount):,.2f}.",
        category="sales_order",
        priority=NotificationPriority.HIGH.value,
        related_entity_type="sales_order",
        related_entity_id=order.id,
    )
    db.commit()
    logger.info("Sales order %s submitted to %s", order.order_code, approver.id)
    return get_sales_order(db, order.id)


def _decide(db: Session, order_id: UUID, approve: bool, current_user: UserToken,
            comments: Optional[str]) -> SalesOrderDetailOut:
    order = get_order_or_404(db, order_id)
    if order.status != SalesOrderStatus.WAITING_APPROVAL.value:
        return error_response(
            message=f"A {order.status} order is not awaiting approval",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    decision = ApprovalStatus.APPROVED if approve else ApprovalStatus.REJECTED
    pending = [a for a in order.approvals if a.status == ApprovalStatus.PENDING.value]
    if pending:
        for approval in pending:
            approval.status = decision.value
            approval.comments = comments
            approval.approved_at = _now()
    else:
        order.approvals.append(SalesOrderApproval(
            approver_id=current_user.user_id,
            status=decision.value,
            comments=comments,
            approved_at=_now(),
        ))

    if approve:
        order.status = SalesOrderStatus.APPROVED.value
        order.approved_by = current_user.user_id
        order.approved_at = _now()
    else:
        order.status = SalesOrderStatus.DRAFT.value

    notify(
        db,
        recipient_id=order.created_by,
        sender_id=current_user.user_id,
        subject=f"Sales order {order.order_code} {decision.value}",
        message=comments or f"Your sales order {order.order_code} was {decision.value}.",
        category="sales_order",
        related_entity_type="sales_order",
        related_entity_id=order.id,
    )
    db.commit()
    logger.info("Sales order %s %s by %s", order.order_code, decision.value, current_user.user_id)
    return get_sales_order(db, order.id)


def approve_sales_order(db: Session, order_id: UUID, current_user: UserToken,
                        comments: Optional[str] = None) -> SalesOrderDetailOut:
    return _decide(db, order_id, True, current_user, comments)


def reject_sales_order(db: Session, order_id: UUID, current_user: UserToken,
                       comments: Optional[str] = None) -> SalesOrderDetailOut:
    return _decide(db, order_id, False, current_user, comments)


# ---------------- Dispatch ----------------

def dispatch_sales_order(db: Session, order_id: UUID, payload: DispatchCreate,
                         current_user: UserToken) -> DispatchOut:
    order = get_order_or_404(db, order_id)
    if order.status not in DISPATCHABLE:
        return error_response(
            message=f"A {order.status} order cannot be dispatched",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    lines: Dict[UUID, SalesOrderItem] = {line.id: line for line in order.items}
    wanted: Dict[UUID, int] = {}
    for entry in payload.items:
        if entry.sales_order_item_id not in lines:
            return not_found("Sales order item")
        wanted[entry.sales_order_item_id] = wanted.get(entry.sales_order_item_id, 0) + entry.quantity

    # validate every line before touching stock
    needed_per_item: Dict[UUID, int] = {}
    for line_id, quantity in wanted.items():
        line = lines[line_id]
        if quantity > line.remaining_quantity:
            return error_response(
                message=f"Only {line.remaining_quantity} of {line.item.name} remain to dispatch",
                status_code=AppStatusCode.INVALID_INPUT
            )
        needed_per_item[line.item_id] = needed_per_item.get(line.item_id, 0) + quantity

    for item_id, needed in needed_per_item.items():
        on_hand = available_quantity(db, item_id, order.warehouse_id)
        if on_hand < needed:
            label = next(l.item.name for l in order.items if l.item_id == item_id)
            return insufficient_stock(label, on_hand, needed)

    dispatch = SalesOrderDispatch(
        dispatch_code=next_code(db, SalesOrderDispatch.dispatch_code, "DIS"),
        sales_order_id=order.id,
        courier_name=payload.courier_name,
        tracking_number=payload.tracking_number,
        vehicle_number=payload.vehicle_number,
        driver_name=payload.driver_name,
        driver_contact=payload.driver_contact,
        notes=payload.notes,
        status=DispatchStatus.DISPATCHED.value,
        dispatched_by=current_user.user_id,
    )
    db.add(dispatch)

    for line_id, quantity in wanted.items():
        line = lines[line_id]
        dispatch.items.append(SalesOrderDispatchItem(
            sales_order_item_id=line.id,
            item_id=line.item_id,
            quantity=quantity,
        ))
        line.dispatched_quantity = (line.dispatched_quantity or 0) + quantity
        adjust_inventory(db, line.item_id, order.warehouse_id, -quantity, item_label=line.item.name)
        record_transaction(
            db,
            transaction_type=TransactionType.ISSUE.value,
            item_id=line.item_id,
            quantity=quantity,
            user_id=current_user.user_id,
            source_warehouse_id=order.warehouse_id,
        )

    fully_shipped = all(line.remaining_quantity == 0 for line in order.items)
    order.status = (SalesOrderStatus.CLOSED if fully_shipped else SalesOrderStatus.PARTIAL_SHIPPED).value

    db.commit()
    db.refresh(dispatch)
    logger.info("Dispatch %s for %s; order now %s", dispatch.dispatch_code, order.order_code, order.status)
    return to_dispatch_out(dispatch)


def _dispatch_or_404(db: Session, dispatch_id: UUID) -> SalesOrderDispatch:
    dispatch = (
        db.query(SalesOrderDispatch)
        .options(selectinload(SalesOrderDispatch.items).joinedload(SalesOrderDispatchItem.item))
        .filter(SalesOrderDispatch.id == dispatch_id)
        .first()
    )
    if not dispatch:
        return not_found("Dispatch")
    return dispatch


def deliver_dispatch(db: Session, dispatch_id: UUID) -> DispatchOut:
    dispatch = _dispatch_or_404(db, dispatch_id)
    if dispatch.status == DispatchStatus.DELIVERED.value:
        return error_response(
            message="Dispatch is already delivered",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    dispatch.status = DispatchStatus.DELIVERED.value
    dispatch.delivered_at = _now()
    db.commit()
    db.refresh(dispatch)
    return to_dispatch_out(dispatch)


# ---------------- Documents ----------------

def sales_order_pdf(db: Session, order_id: UUID) -> bytes:
    detail = get_sales_order(db, order_id)
    settings = get_or_create_settings(db)
    return generate_sales_order_pdf(
        detail.model_dump(),
        organization_name=settings.organization_name,
        currency_symbol=settings.currency_symbol,
    )


def dispatch_challan_pdf(db: Session, dispatch_id: UUID) -> bytes:
    dispatch = _dispatch_or_404(db, dispatch_id)
    order = to_order_out(get_order_or_404(db, dispatch.sales_order_id))
    settings = get_or_create_settings(db)
    return generate_dispatch_challan_pdf(
        to_dispatch_out(dispatch).model_dump(),
        order.model_dump(),
        organization_name=settings.organization_name,
    )
