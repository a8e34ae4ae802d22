# app/crud/requests/requests_crud.py
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, joinedload, selectinload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole, UserStatus
from ...enum.inventory_enum import TransactionStatus, TransactionType
from ...enum.request_enum import (
    ApprovalAction, ApprovalLevel, ApprovalStatus, RequestStatus, TransferNotificationStatus)
from ...helpers.code_generator import next_code
from ...models.masters.items import Item
from ...models.masters.warehouses import Warehouse
from ...models.requests.requests import Request, RequestApproval, RequestItem
from ...models.requests.transfer_notifications import TransferNotification
from ...models.stock.inventory import Inventory
from ...schemas.requests.requests_schemas import (
    RequestApprovalOut, RequestCreate, RequestItemOut, RequestOut)
from ..masters.warehouses_crud import get_warehouse_or_404
from ..stock.stock_ledger import adjust_inventory, available_quantity, record_transaction

logger = logging.getLogger(__name__)

OPEN_STATUSES = (RequestStatus.PENDING.value, RequestStatus.PENDING_TRANSFER.value)


def _now():
    return datetime.now(timezone.utc)


# ---------------- Read ----------------

def _request_query(db: Session):
    return db.query(Request).options(
        joinedload(Request.user),
        joinedload(Request.warehouse),
        selectinload(Request.items).joinedload(RequestItem.item),
    )


def to_request_out(req: Request) -> RequestOut:
    return RequestOut(
        id=req.id,
        request_code=req.request_code,
        user_id=req.user_id,
        user_name=req.user.name if req.user else None,
        warehouse_id=req.warehouse_id,
        warehouse_name=req.warehouse.name if req.warehouse else None,
        status=req.status,
        priority=req.priority,
        justification=req.justification,
        notes=req.notes,
        created_at=req.created_at,
        updated_at=req.updated_at,
        items=[to_request_item_out(line) for line in req.items],
    )


def to_request_item_out(line: RequestItem) -> RequestItemOut:
    return RequestItemOut(
        id=line.id,
        item_id=line.item_id,
        quantity=line.quantity,
        item_name=line.item.name if line.item else None,
        sku=line.item.sku if line.item else None,
        unit=line.item.unit if line.item else None,
    )


def _visible(query, current_user: UserToken):
    if not current_user.is_manager:
        query = query.filter(Request.user_id == current_user.user_id)
    return query


def get_requests(db: Session, current_user: UserToken) -> List[RequestOut]:
    rows = _visible(_request_query(db), current_user).order_by(Request.created_at.desc()).all()
    return [to_request_out(r) for r in rows]


def get_requests_by_status(db: Session, status: str, current_user: UserToken) -> List[RequestOut]:
    try:
        status = RequestStatus(status).value
    except ValueError:
        return error_response(
            message=f"Invalid request status '{status}'",
            status_code=AppStatusCode.INVALID_INPUT
        )
    rows = (
        _visible(_request_query(db), current_user)
        .filter(Request.status == status)
        .order_by(Request.created_at.desc())
        .all()
    )
    return [to_request_out(r) for r in rows]


def get_request_or_404(db: Session, request_id: UUID, current_user: UserToken) -> Request:
    req = _request_query(db).filter(Request.id == request_id).first()
    if not req:
        return not_found("Request")
    if not current_user.is_manager and req.user_id != current_user.user_id:
        return forbidden("You can only view your own requests")
    return req


def get_request(db: Session, request_id: UUID, current_user: UserToken) -> RequestOut:
    return to_request_out(get_request_or_404(db, request_id, current_user))


def get_request_items(db: Session, request_id: UUID, current_user: UserToken) -> List[RequestItemOut]:
    return [to_request_item_out(line) for line in get_request_or_404(db, request_id, current_user).items]


# ---------------- Create ----------------

def _approver_for(db: Session, requester: Users):
    """Requester's manager, else the first admin. Admin requests need no approval."""
    if requester.role == UserRole.ADMIN.value:
        return None, None

    if requester.manager_id:
        manager = db.query(Users).filter(
            Users.id == requester.manager_id, Users.is_deleted == False).first()
        if manager:
            level = ApprovalLevel.ADMIN if manager.role == UserRole.ADMIN.value else ApprovalLevel.MANAGER
            return manager, level

    admin = (
        db.query(Users)
        .filter(Users.role == UserRole.ADMIN.value, Users.is_deleted == False,
                Users.status == UserStatus.active.value)
        .order_by(Users.created_at.asc(), Users.username.asc())
        .first()
    )
    return (admin, ApprovalLevel.ADMIN) if admin else (None, None)


def create_request(db: Session, payload: RequestCreate, current_user: UserToken) -> RequestOut:
    warehouse = get_warehouse_or_404(db, payload.warehouse_id)
    requester = db.query(Users).filter(Users.id == current_user.user_id).first()

    item_ids = {line.item_id for line in payload.items}
    items = {i.id: i for i in db.query(Item).filter(
        Item.id.in_(list(item_ids)), Item.is_deleted == False).all()}
    if len(items) != len(item_ids):
        return not_found("Item")

    req = Request(
        request_code=next_code(db, Request.request_code, "REQ", width=4, start=1000),
        user_id=current_user.user_id,
        warehouse_id=warehouse.id,
        status=RequestStatus.PENDING.value,
        priority=payload.priority.value,
        justification=payload.justification,
        notes=payload.notes,
    )
    db.add(req)
    db.flush()

    requested = defaultdict(int)
    for line in payload.items:
        db.add(RequestItem(request_id=req.id, item_id=line.item_id, quantity=line.quantity))
        requested[line.item_id] += line.quantity

    shortages = []
    for item_id, quantity in requested.items():
        on_hand = available_quantity(db, item_id, warehouse.id)
        if on_hand >= quantity:
            continue

        shortfall = quantity - on_hand
        shortages.append(f"{items[item_id].name} (short {shortfall})")
        donors = (
            db.query(Inventory, Warehouse)
            .join(Warehouse, Warehouse.id == Inventory.warehouse_id)
            .filter(
                Inventory.item_id == item_id,
                Inventory.warehouse_id != warehouse.id,
                Inventory.quantity > 0,
                Warehouse.is_active == True
            )
            .order_by(Warehouse.name.asc())
            .all()
        )
        for stock, donor in donors:
            db.add(TransferNotification(
                request_id=req.id,
                warehouse_id=donor.id,
                item_id=item_id,
                required_quantity=min(shortfall, stock.quantity),
                available_quantity=stock.quantity,
                status=TransferNotificationStatus.PENDING.value,
                notified_user_id=donor.manager_id,
            ))

    if shortages:
        req.status = RequestStatus.PENDING_TRANSFER.value
        note = f"Insufficient stock in {warehouse.name}: {', '.join(shortages)}. Transfer required."
        req.notes = f"{req.notes}\n{note}" if req.notes else note

    approver, level = _approver_for(db, requester)
    if approver:
        db.add(RequestApproval(
            request_id=req.id,
            approver_id=approver.id,
            approval_level=level.value,
            status=ApprovalStatus.PENDING.value,
        ))

    db.commit()
    logger.info("Request %s created by %s (%s)", req.request_code, current_user.user_id, req.status)
    return get_request(db, req.id, current_user)


# ---------------- Resolution ----------------

def _plan_fulfilment(db: Session, req: Request) -> List[Tuple[RequestItem, UUID, bool]]:
    """
    Pick a source for every line before anything is written.

    Returns (line, warehouse_id, is_local) triples. The requested warehouse is
    preferred; otherwise the first other active warehouse by name that can
    cover the whole line wins.
    """
    committed: Dict[Tuple[UUID, UUID], int] = defaultdict(int)

    def free(item_id, warehouse_id):
        return available_quantity(db, item_id, warehouse_id) - committed[(item_id, warehouse_id)]

    others = (
        db.query(Warehouse)
        .filter(Warehouse.id != req.warehouse_id, Warehouse.is_active == True)
        .order_by(Warehouse.name.asc())
        .all()
    )

    plan = []
    for line in req.items:
        if free(line.item_id, req.warehouse_id) >= line.quantity:
            source_id, is_local = req.warehouse_id, True
        else:
            donor = next((w for w in others if free(line.item_id, w.id) >= line.quantity), None)
            if donor is None:
                name = line.item.name if line.item else str(line.item_id)
                logger.warning("Request %s cannot be fulfilled: no stock for %s",
                               req.request_code, name)
                return error_response(
                    message=f"No warehouse has enough stock of {name} ({line.quantity} required)",
                    status_code=AppStatusCode.INSUFFICIENT_STOCK
                )
            source_id, is_local = donor.id, False

        committed[(line.item_id, source_id)] += line.quantity
        plan.append((line, source_id, is_local))
    return plan


def resolve_request(db: Session, req: Request, current_user: UserToken):
    """Issue locally or transfer in from a donor for every line. Does not commit."""
    plan = _plan_fulfilment(db, req)

    for line, source_id, is_local in plan:
        label = line.item.name if line.item else None
        if is_local:
            record_transaction(
                db, transaction_type=TransactionType.ISSUE.value, item_id=line.item_id,
                quantity=line.quantity, user_id=current_user.user_id,
                source_warehouse_id=source_id, request_id=req.id, requester_id=req.user_id,
            )
        else:
            record_transaction(
                db, transaction_type=TransactionType.TRANSFER.value, item_id=line.item_id,
                quantity=line.quantity, user_id=current_user.user_id,
                status=TransactionStatus.IN_TRANSIT.value,
                source_warehouse_id=source_id, destination_warehouse_id=req.warehouse_id,
                request_id=req.id, requester_id=req.user_id,
            )
        adjust_inventory(db, line.item_id, source_id, -line.quantity, label)

    donors = {(line.item_id, source_id) for line, source_id, is_local in plan if not is_local}
    notifications = db.query(TransferNotification).filter(
        TransferNotification.request_id == req.id,
        TransferNotification.status == TransferNotificationStatus.PENDING.value
    ).all()
    for notification in notifications:
        notification.status = (
            TransferNotificationStatus.TRANSFERRED.value
            if (notification.item_id, notification.warehouse_id) in donors
            else TransferNotificationStatus.REJECTED.value
        )
        notification.resolved_at = _now()

    logger.info("Request %s resolved: %s local, %s transferred", req.request_code,
                sum(1 for p in plan if p[2]), sum(1 for p in plan if not p[2]))


def update_request_status(db: Session, request_id: UUID, status: RequestStatus,
                          current_user: UserToken) -> RequestOut:
    req = get_request_or_404(db, request_id, current_user)

    if req.status == status.value:
        return to_request_out(req)
    if req.status in (RequestStatus.COMPLETED.value, RequestStatus.REJECTED.value):
        return error_response(
            message=f"A {req.status} request cannot change status",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    if status in (RequestStatus.APPROVED, RequestStatus.COMPLETED) and req.status in OPEN_STATUSES:
        resolve_request(db, req, current_user)
    elif status in (RequestStatus.PENDING, RequestStatus.PENDING_TRANSFER, RequestStatus.REJECTED) \
            and req.status == RequestStatus.APPROVED.value:
        return error_response(
            message="An approved request has already been fulfilled",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    req.status = status.value
    db.commit()
    logger.info("Request %s set to %s by %s", req.request_code, status.value, current_user.user_id)
    return get_request(db, request_id, current_user)


# ---------------- Approvals ----------------

def _to_approval_out(approval: RequestApproval) -> RequestApprovalOut:
    out = RequestApprovalOut.model_validate(approval)
    out.request_code = approval.request.request_code if approval.request else None
    return out


def get_request_approvals(db: Session, request_id: UUID, current_user: UserToken) -> List[RequestApprovalOut]:
    req = get_request_or_404(db, request_id, current_user)
    return [_to_approval_out(a) for a in req.approvals]


def get_pending_approvals(db: Session, current_user: UserToken) -> List[RequestApprovalOut]:
    rows = (
        db.query(RequestApproval)
        .options(joinedload(RequestApproval.request))
        .filter(
            RequestApproval.approver_id == current_user.user_id,
            RequestApproval.status == ApprovalStatus.PENDING.value
        )
        .order_by(RequestApproval.created_at.asc())
        .all()
    )
    return [_to_approval_out(a) for a in rows]


def act_on_approval(db: Session, approval_id: UUID, action: ApprovalAction,
                    current_user: UserToken, comments: str = None) -> RequestApprovalOut:
    approval = db.query(RequestApproval).filter(RequestApproval.id == approval_id).first()
    if not approval:
        return not_found("Approval")
    if approval.approver_id != current_user.user_id:
        return forbidden("Only the assigned approver can act on this approval")
    if approval.status != ApprovalStatus.PENDING.value:
        return error_response(
            message=f"Approval is already {approval.status}",
            status_code=AppStatusCode.INVALID_STATUS_TRANSITION
        )

    req = _request_query(db).filter(Request.id == approval.request_id).first()

    if action == ApprovalAction.APPROVE:
        if req.status in OPEN_STATUSES:
            resolve_request(db, req, current_user)
        elif req.status != RequestStatus.APPROVED.value:
            return error_response(
                message=f"A {req.status} request cannot be approved",
                status_code=AppStatusCode.INVALID_STATUS_TRANSITION
            )
        approval.status = ApprovalStatus.APPROVED.value
        req.status = RequestStatus.COMPLETED.value
    else:
        if req.status not in OPEN_STATUSES:
            return error_response(
                message=f"A {req.status} request cannot be rejected",
                status_code=AppStatusCode.INVALID_STATUS_TRANSITION
            )
        approval.status = ApprovalStatus.REJECTED.value
        req.status = RequestStatus.REJECTED.value

    approval.comments = comments
    approval.approved_at = _now()
    db.commit()
    db.refresh(approval)
    logger.info("Approval %s %s by %s; request %s now %s", approval.id, action.value,
                current_user.user_id, req.request_code, req.status)
    return _to_approval_out(approval)
